"""
Base model shared by all kerntune models.
"""

from pydantic import BaseModel, ConfigDict


class KerntuneBaseModel(BaseModel):
    """
    Base model for all of kerntune.
    Common configuration and stricter validation.
    """

    model_config = ConfigDict(
        # Validate values on assignment
        validate_assignment=True,
        # Prevent extra fields
        extra="forbid",
    )
