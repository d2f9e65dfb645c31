from rest_framework import status

from core.exceptions import DomainError


class InvalidBetError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_bet"
    default_detail = "Invalid bet."
