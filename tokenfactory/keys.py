"""Store keys, event attribute names and module constants."""

from __future__ import annotations

MODULE_NAME = "tokenfactory"
STORE_KEY = MODULE_NAME
ROUTER_KEY = MODULE_NAME
QUERIER_ROUTE = MODULE_NAME
MEM_STORE_KEY = "mem_tokenfactory"

KEY_SEPARATOR = "|"

DENOM_AUTHORITY_METADATA_KEY = "authoritymetadata"
DENOMS_PREFIX_KEY = "denoms"
CREATOR_PREFIX_KEY = "creator"
ADMIN_PREFIX_KEY = "admin"
BEFORE_SEND_HOOK_ADDRESS_PREFIX_KEY = "beforesendhook"
# The params prefix is the second entry of its constant block, hence 2.
PARAMS_KEY = bytes([2])

CONSENSUS_VERSION = 2
TRACK_BEFORE_SEND_GAS_LIMIT = 100_000

MODULE_DENOM_PREFIX = "factory"
# Subdenom plus hrp length adds up to 60, keeping denoms under 128 bytes.
MAX_SUBDENOM_LENGTH = 44
MAX_HRP_LENGTH = 16
MAX_CREATOR_LENGTH = 59 + MAX_HRP_LENGTH

ATTRIBUTE_AMOUNT = "amount"
ATTRIBUTE_CREATOR = "creator"
ATTRIBUTE_SUBDENOM = "subdenom"
ATTRIBUTE_NEW_TOKEN_DENOM = "new_token_denom"
ATTRIBUTE_MINT_TO_ADDRESS = "mint_to_address"
ATTRIBUTE_BURN_FROM_ADDRESS = "burn_from_address"
ATTRIBUTE_TRANSFER_FROM_ADDRESS = "transfer_from_address"
ATTRIBUTE_TRANSFER_TO_ADDRESS = "transfer_to_address"
ATTRIBUTE_DENOM = "denom"
ATTRIBUTE_NEW_ADMIN = "new_admin"
ATTRIBUTE_DENOM_METADATA = "denom_metadata"
ATTRIBUTE_BEFORE_SEND_HOOK_ADDRESS = "before_send_hook_address"


def get_denom_prefix_store(denom: str) -> bytes:
    """Prefix under which all data of one denom is stored."""
    return KEY_SEPARATOR.join((DENOMS_PREFIX_KEY, denom, "")).encode()


def get_creator_prefix(creator: str) -> bytes:
    """Prefix under which the denoms of one creator are stored."""
    return KEY_SEPARATOR.join((CREATOR_PREFIX_KEY, creator, "")).encode()


def get_creators_prefix() -> bytes:
    """Prefix under which all creators' denom lists are stored."""
    return KEY_SEPARATOR.join((CREATOR_PREFIX_KEY, "")).encode()