from rest_framework import status

from core.exceptions import DomainError


class InvalidRedeemCodeError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_redeem_code"
    default_detail = "Invalid code."
