"""Schemas for the privileged role-update function."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Reported as previousRole when the target had no assignment before the write.
NO_PREVIOUS_ROLE = "none"


class RoleUpdateRequest(BaseModel):
    """
    Body of POST update-user-role. Fields are optional here so that missing
    values are reported by the service (400) rather than by request validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    target_user_id: str | None = Field(default=None, alias="targetUserId")
    new_role: str | None = Field(default=None, alias="newRole")

    @field_validator("target_user_id", "new_role", mode="before")
    @classmethod
    def coerce_scalar(cls, v: object) -> str | None:
        # Numbers become strings so they fail the role/target checks instead of validation.
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return None


class RoleUpdateResult(BaseModel):
    """Successful role change."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Role updated successfully"
    previous_role: str = Field(..., alias="previousRole")
    new_role: str = Field(..., alias="newRole")


class ErrorResponse(BaseModel):
    """Error body shared by every failure of the role-update function."""

    error: str
