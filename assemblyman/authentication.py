"""
Service credentials for the HTTP API.

Every call must carry both headers:

    Authorization: Bearer <token>
    Apikey: <key>

Accepted values come from ASSEMBLYMAN["BEARER_TOKENS"] and
ASSEMBLYMAN["API_KEYS"]. The acting user travels in the request body.
"""

from django.utils.crypto import constant_time_compare
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.permissions import BasePermission

from assemblyman.conf import assemblyman_settings


class ServiceClient:
    """The authenticated caller: the application, not a person."""

    is_authenticated = True
    is_anonymous = False

    def __str__(self) -> str:
        return "service-client"


def _matches(value: str, accepted) -> bool:
    return any(constant_time_compare(value, candidate) for candidate in accepted)


class ServiceKeyAuthentication(BaseAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        api_key = request.META.get('HTTP_APIKEY', '')

        if not auth and not api_key:
            return None

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            raise exceptions.AuthenticationFailed('Bearer credential required.')
        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid bearer header.')

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid bearer header.') from None

        if not _matches(token, assemblyman_settings.BEARER_TOKENS):
            raise exceptions.AuthenticationFailed('Invalid bearer token.')
        if not api_key or not _matches(api_key, assemblyman_settings.API_KEYS):
            raise exceptions.AuthenticationFailed('Invalid or missing API key.')

        return (ServiceClient(), token)

    def authenticate_header(self, request):
        return self.keyword


class HasServiceCredentials(BasePermission):
    def has_permission(self, request, view):
        return isinstance(request.user, ServiceClient)
