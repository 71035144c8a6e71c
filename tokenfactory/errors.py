"""Errors raised by the token factory module."""

from __future__ import annotations

from .keys import MAX_CREATOR_LENGTH, MAX_SUBDENOM_LENGTH, MODULE_NAME


class TokenFactoryError(Exception):
    """Base error; carries a codespace, a numeric code and a description."""

    codespace = MODULE_NAME
    code = 1
    description = "internal error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = f"{detail}: {self.description}" if detail else self.description
        super().__init__(message)


class DenomExistsError(TokenFactoryError):
    code = 2
    description = "attempting to create a denom that already exists (has bank metadata)"


class UnauthorizedError(TokenFactoryError):
    code = 3
    description = "unauthorized account"


class InvalidDenomError(TokenFactoryError):
    code = 4
    description = "invalid denom"


class InvalidCreatorError(TokenFactoryError):
    code = 5
    description = "invalid creator"


class InvalidAuthorityMetadataError(TokenFactoryError):
    code = 6
    description = "invalid authority metadata"


class InvalidGenesisError(TokenFactoryError):
    code = 7
    description = "invalid genesis"


class SubdenomTooLongError(TokenFactoryError):
    code = 8
    description = f"subdenom too long, max length is {MAX_SUBDENOM_LENGTH} bytes"


class CreatorTooLongError(TokenFactoryError):
    code = 9
    description = f"creator too long, max length is {MAX_CREATOR_LENGTH} bytes"


class DenomDoesNotExistError(TokenFactoryError):
    code = 10
    description = "denom does not exist"


class BurnFromModuleAccountError(TokenFactoryError):
    code = 11
    description = "burning from Module Account is not allowed"


class TrackBeforeSendOutOfGasError(TokenFactoryError):
    code = 12
    description = "gas meter hit maximum limit"


class InvalidHookContractAddressError(TokenFactoryError):
    code = 13
    description = "invalid hook contract address"


class InvalidAddressError(TokenFactoryError):
    """An account address could not be parsed or has the wrong form."""

    codespace = "sdk"
    code = 7
    description = "invalid address"


class InvalidCoinsError(TokenFactoryError):
    codespace = "sdk"
    code = 10
    description = "invalid coins"


class InvalidRequestError(TokenFactoryError):
    codespace = "sdk"
    code = 18
    description = "invalid request"


class ModuleAccountForbiddenError(TokenFactoryError):
    """A mint, burn or transfer touched a known module account."""

    codespace = "grpc"
    code = 13
    description = "operation on module accounts is forbidden"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        Exception.__init__(self, detail or self.description)