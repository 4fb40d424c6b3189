"""Account labels and their on-chain contract addresses."""

import logging
from enum import Enum
from typing import Mapping, Optional, Union

from smartremit.errors import ValidationError

logger = logging.getLogger(__name__)

MULTISIG = "MULTISIG"


class AccountLabel(str, Enum):
    """Domain accounts, each backed by a deployed smart account contract."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"


TransferDestination = Union[AccountLabel, str]


def parse_label(value: str, field_name: str = "account") -> AccountLabel:
    """Parse an account label, raising ValidationError on unknown values."""
    if isinstance(value, AccountLabel):
        return value
    try:
        return AccountLabel(str(value).upper())
    except ValueError:
        allowed = ", ".join(label.value for label in AccountLabel)
        raise ValidationError(
            f"{field_name} must be one of: {allowed}. Received: {value}"
        ) from None


class AccountDirectory:
    """Two-way lookup between account labels and contract addresses.

    Built once at startup and read-only afterwards.
    """

    def __init__(self, accounts: Mapping[str, str], multisig_address: str = ""):
        """Initialize directory.

        Args:
            accounts: Label -> contract address (empty addresses are skipped)
            multisig_address: Treasury contract used for the MULTISIG destination
        """
        self._addresses: dict[AccountLabel, str] = {}
        for label, address in accounts.items():
            if address:
                self._addresses[AccountLabel(label)] = address
        self._labels = {address: label for label, address in self._addresses.items()}
        self.multisig_address = multisig_address

        missing = [label.value for label in AccountLabel if label not in self._addresses]
        if missing:
            logger.warning(f"No contract configured for account(s): {', '.join(missing)}")

    def address_of(self, label: AccountLabel) -> str:
        """Get the contract address for a label.

        Raises:
            ValidationError: If the label has no configured address
        """
        label = parse_label(label)
        address = self._addresses.get(label)
        if not address:
            raise ValidationError(f"Missing contract ID for account {label.value}")
        return address

    def label_of(self, address: str) -> Optional[AccountLabel]:
        """Get the label for an address, or None if the address is not ours."""
        return self._labels.get(address)

    def resolve_destination(self, destination: TransferDestination) -> str:
        """Resolve a transfer destination, including the MULTISIG treasury."""
        if destination == MULTISIG:
            if not self.multisig_address:
                raise ValidationError("Missing contract ID for multisig treasury")
            return self.multisig_address
        return self.address_of(destination)

    @property
    def labels(self) -> list[AccountLabel]:
        """All labels, in declaration order."""
        return list(AccountLabel)
