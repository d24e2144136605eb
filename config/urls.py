from django.contrib import admin
from django.urls import path, include
from core.views import HealthCheckView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('authx.urls')),
    path('api/groups/', include('core.urls')),
    path('api/activities/', include('activities.urls')),
    path('api/calendar/', include('ux.urls')),
    path("api/health/", HealthCheckView.as_view(), name="health-check"),
]
