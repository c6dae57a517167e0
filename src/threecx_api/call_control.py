"""Call control endpoints: DN state, devices, participants and call actions."""

import logging
from typing import TYPE_CHECKING
from urllib.parse import quote

from .consts import (
    CALL_CONTROL_URL_PATH,
    DEFAULT_PARTICIPANT_ACTION_REASON,
    DEFAULT_TRANSFER_TIMEOUT,
)
from .exceptions import InvalidParameterError
from .models import (
    ActionResponse,
    Device,
    DnState,
    MakeCallParameters,
    Participant,
    ParticipantActionParameters,
)

if TYPE_CHECKING:
    from .client import ThreeCXClient

logger = logging.getLogger("threecx-api.call_control")


def _require(**values: str | None) -> None:
    """Raise InvalidParameterError naming every empty argument."""
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise InvalidParameterError(
            f"{', '.join(missing)} must not be empty",
            errors=[f"Empty value for {name}" for name in missing],
            context={"parameters": missing},
        )


def _segment(value: str | int) -> str:
    return quote(str(value), safe="")


def _dn_path(dn: str, *parts: str | int) -> str:
    path = f"{CALL_CONTROL_URL_PATH}/{_segment(dn)}"
    for part in parts:
        path += f"/{_segment(part)}"
    return path


class CallControlService:
    """Thin wrappers over the ``/callcontrol`` API.

    HTTP failures propagate as httpx exceptions and unexpected bodies as
    pydantic.ValidationError.
    """

    def __init__(self, client: "ThreeCXClient"):
        self.client = client

    async def get_call_control_state(self) -> list[DnState]:
        """Get the call control state of every DN."""
        data = await self.client.get_json(CALL_CONTROL_URL_PATH)
        return [DnState.model_validate(item) for item in data or []]

    async def get_dn_state(self, dn: str) -> DnState | None:
        """Get the call control state of one DN."""
        _require(dn=dn)
        data = await self.client.get_json(_dn_path(dn))
        return DnState.model_validate(data) if data is not None else None

    async def get_devices(self, dn: str) -> list[Device]:
        _require(dn=dn)
        data = await self.client.get_json(_dn_path(dn, "devices"))
        return [Device.model_validate(item) for item in data or []]

    async def get_device(self, dn: str, device_id: str) -> Device | None:
        _require(dn=dn, device_id=device_id)
        data = await self.client.get_json(_dn_path(dn, "devices", device_id))
        return Device.model_validate(data) if data is not None else None

    async def get_participants(self, dn: str) -> list[Participant]:
        _require(dn=dn)
        data = await self.client.get_json(_dn_path(dn, "participants"))
        return [Participant.model_validate(item) for item in data or []]

    async def get_participant(self, dn: str, participant_id: int) -> Participant | None:
        _require(dn=dn)
        data = await self.client.get_json(_dn_path(dn, "participants", participant_id))
        return Participant.model_validate(data) if data is not None else None

    async def make_call(self, dn: str, parameters: MakeCallParameters) -> ActionResponse:
        """Initiate a call from a DN.

        Args:
            dn: The DN number placing the call.
            parameters: Destination, timeout and attached data.

        Raises:
            InvalidParameterError: If dn or the destination is empty.
        """
        _require(dn=dn, destination=parameters.destination)
        logger.info(f"Making call from {dn} to {parameters.destination}")
        return await self._post_action(_dn_path(dn, "makecall"), parameters)

    async def make_call_from_device(
        self, dn: str, device_id: str, parameters: MakeCallParameters
    ) -> ActionResponse:
        """Initiate a call from a specific device of a DN."""
        _require(dn=dn, device_id=device_id, destination=parameters.destination)
        logger.info(
            f"Making call from {dn} device {device_id} to {parameters.destination}"
        )
        return await self._post_action(
            _dn_path(dn, "devices", device_id, "makecall"), parameters
        )

    async def perform_participant_action(
        self,
        dn: str,
        participant_id: int,
        action: str,
        parameters: ParticipantActionParameters,
    ) -> ActionResponse:
        """Perform an action (drop, answer, transferto, divert, ...) on a participant."""
        _require(dn=dn, action=action)
        logger.info(f"Participant action {action} on {dn}/{participant_id}")
        return await self._post_action(
            _dn_path(dn, "participants", participant_id, action), parameters
        )

    async def drop_participant(self, dn: str, participant_id: int) -> ActionResponse:
        """Drop a participant from its call."""
        parameters = ParticipantActionParameters(reason=DEFAULT_PARTICIPANT_ACTION_REASON)
        return await self.perform_participant_action(
            dn, participant_id, "drop", parameters
        )

    async def answer_call(self, dn: str, participant_id: int) -> ActionResponse:
        """Answer a ringing call for a participant."""
        parameters = ParticipantActionParameters(reason=DEFAULT_PARTICIPANT_ACTION_REASON)
        return await self.perform_participant_action(
            dn, participant_id, "answer", parameters
        )

    async def transfer_call(
        self,
        dn: str,
        participant_id: int,
        destination: str,
        reason: str = DEFAULT_PARTICIPANT_ACTION_REASON,
        timeout: int = DEFAULT_TRANSFER_TIMEOUT,
    ) -> ActionResponse:
        """Transfer a participant's call to another destination."""
        _require(destination=destination)
        parameters = ParticipantActionParameters(
            reason=reason, destination=destination, timeout=timeout
        )
        return await self.perform_participant_action(
            dn, participant_id, "transferto", parameters
        )

    async def _post_action(
        self, path: str, parameters: MakeCallParameters | ParticipantActionParameters
    ) -> ActionResponse:
        data = await self.client.post_json(
            path, json=parameters.model_dump(by_alias=True, exclude_none=True)
        )
        return ActionResponse.model_validate(data)
