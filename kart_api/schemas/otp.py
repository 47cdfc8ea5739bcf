"""OTP login request and response schemas."""

from pydantic import BaseModel, Field


class SendOtpRequest(BaseModel):
    """Payload for requesting an OTP."""

    phoneNumber: str = Field(min_length=1)


class SendOtpResponse(BaseModel):
    message: str
    verificationId: str | None = None


class VerifyOtpRequest(BaseModel):
    """Payload for verifying a previously issued OTP."""

    phoneNumber: str = Field(min_length=1)
    otp: str = Field(min_length=1)


class VerifyOtpResponse(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
