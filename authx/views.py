import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken

from users.serializers import UserSummarySerializer
from .serializers import RegisterSerializer, LoginSerializer

logger = logging.getLogger("lyfez.auth")


def token_payload(user):
    refresh = RefreshToken.for_user(user)
    return {
        "user": UserSummarySerializer(user).data,
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


class RegisterView(APIView):
    # allow unauthenticated
    permission_classes = []
    authentication_classes = []
    throttle_scope = "auth"

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User registered: id=%s", user.id)
        return Response(token_payload(user), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    # allow unauthenticated
    permission_classes = []
    authentication_classes = []
    throttle_scope = "auth"

    def get_authenticate_header(self, request):
        # Without a header DRF reports AuthenticationFailed as 403
        return 'Bearer realm="api"'

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            raise AuthenticationFailed("Invalid credentials")

        user = serializer.validated_data['user']
        return Response(token_payload(user), status=status.HTTP_200_OK)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSummarySerializer(request.user).data)
