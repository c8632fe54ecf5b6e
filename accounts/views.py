import logging
from rest_framework import generics, status
from rest_framework.views import APIView
from rest_framework.response import Response
from django.contrib.auth import get_user_model, authenticate
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.authtoken.models import Token

from accounts.serializers import BaseUserSerializer, UserLoginSerializer
from accounts.permissions import IsSystemAdmin

logger = logging.getLogger(__name__)

User = get_user_model()

"""
Authentication
"""


class TokenView(APIView):
    permission_classes = (AllowAny,)
    serializer_class = UserLoginSerializer

    def post(self, request, format=None):
        serializer = self.serializer_class(data=request.data)

        if serializer.is_valid():
            email = serializer.validated_data["email"]
            password = serializer.validated_data["password"]

            user = authenticate(request, email=email, password=password)

            if user:
                token, created = Token.objects.get_or_create(user=user)
                user_details = {
                    "id": user.id,
                    "email": user.email,
                    "first_name": user.first_name,
                    "last_name": user.last_name,
                    "reference": user.reference,
                    "member": user.member.member_no if user.member else None,
                    "is_system_admin": user.is_system_admin,
                    "is_active": user.is_active,
                    "is_staff": user.is_staff,
                    "is_superuser": user.is_superuser,
                    "last_login": user.last_login,
                    "token": token.key,
                }
                logger.info(f"Issued token for {user.email}")
                return Response(user_details, status=status.HTTP_200_OK)
            return Response(
                {"detail": "Unable to log in with provided credentials."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


"""
System admin views
"""


class UserListCreateView(generics.ListCreateAPIView):
    permission_classes = (IsSystemAdmin,)
    serializer_class = BaseUserSerializer
    queryset = User.objects.all().select_related("member")


class UserDetailView(generics.RetrieveUpdateAPIView):
    permission_classes = (IsSystemAdmin,)
    serializer_class = BaseUserSerializer
    queryset = User.objects.all()
    lookup_field = "reference"


class CurrentUserView(generics.RetrieveAPIView):
    """
    The authenticated principal, including the linked member if any.
    """

    permission_classes = (IsAuthenticated,)
    serializer_class = BaseUserSerializer

    def get_object(self):
        return self.request.user
