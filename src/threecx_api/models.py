"""Call control request and response models.

Field names follow Python conventions; aliases carry the PBX wire names.
Unknown wire fields are ignored and missing strings default to "".
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .consts import DEFAULT_PARTICIPANT_ACTION_REASON


class ApiModel(BaseModel):
    """Base for all PBX payload models.

    Wire keys match case-insensitively (``FinalStatus`` fills ``finalstatus``).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _lowercase_keys(cls, data: Any) -> Any:
        # aliases and field names are all lowercase
        if isinstance(data, dict):
            return {
                key.lower() if isinstance(key, str) else key: value
                for key, value in data.items()
            }
        return data


# =============================================================================
# CALL CONTROL STATE
# =============================================================================


class Device(ApiModel):
    """A device registered to a DN."""

    dn: str = ""
    device_id: str = ""
    user_agent: str = ""


class Participant(ApiModel):
    """A call leg attached to a DN."""

    id: int = 0
    status: str = ""
    dn: str = ""
    party_caller_name: str = ""
    party_dn: str = ""
    party_caller_id: str = ""
    party_did: str = ""
    device_id: str = ""
    party_dn_type: str = ""
    direct_control: bool = False
    originated_by_dn: str = ""
    originated_by_type: str = ""
    referred_by_dn: str = ""
    referred_by_type: str = ""
    on_behalf_of_dn: str = ""
    on_behalf_of_type: str = ""
    call_id: int = Field(default=0, alias="callid")
    leg_id: int = Field(default=0, alias="legid")


class DnState(ApiModel):
    """Devices and active participants of one DN."""

    dn: str = ""
    type: str = ""
    devices: list[Device] = Field(default_factory=list)
    participants: list[Participant] = Field(default_factory=list)


class ActionResponse(ApiModel):
    """Outcome of a call control action."""

    final_status: str = Field(default="", alias="finalstatus")
    reason: str = ""
    result: Participant | None = None
    reason_text: str = Field(default="", alias="reasontext")


# =============================================================================
# ACTION PARAMETERS
# =============================================================================


class MakeCallParameters(ApiModel):
    """Body of a makecall request."""

    destination: str = Field(default="", description="The destination number to call")
    timeout: int = Field(default=0, description="Call timeout in seconds")
    attached_data: dict[str, str] | None = Field(
        default=None, alias="attacheddata", description="Optional attached data"
    )


class ParticipantActionParameters(ApiModel):
    """Body of a participant action (drop, answer, transferto, divert, ...)."""

    reason: str = Field(
        default=DEFAULT_PARTICIPANT_ACTION_REASON,
        description="The reason for performing the action",
    )
    destination: str | None = Field(
        default=None, description="Target for divert, routeto and transferto"
    )
    timeout: int = Field(default=0, description="The timeout value for the action")
    attached_data: dict[str, str] | None = Field(
        default=None, alias="attacheddata", description="Optional attached data"
    )
