"""Phone-number OTP login endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kart_api.core.security import create_access_token
from kart_api.db.session import get_db
from kart_api.schemas.otp import SendOtpRequest, SendOtpResponse, VerifyOtpRequest, VerifyOtpResponse
from kart_api.services.otp_service import request_otp, verify_otp
from kart_api.services.sms import BaseSmsGateway, get_sms_gateway

router: APIRouter = APIRouter()


@router.post("/send-otp", response_model=SendOtpResponse)
def send_otp(
    payload: SendOtpRequest,
    db: Session = Depends(get_db),
    gateway: BaseSmsGateway = Depends(get_sms_gateway),
) -> SendOtpResponse:
    dispatch = request_otp(db, gateway, payload.phoneNumber)
    return SendOtpResponse(message="OTP sent successfully", verificationId=dispatch.message_id)


@router.post("/verify-otp", response_model=VerifyOtpResponse)
def check_otp(payload: VerifyOtpRequest, db: Session = Depends(get_db)) -> VerifyOtpResponse:
    """Consume a pending OTP and issue an access token for the phone number."""
    verify_otp(db, payload.phoneNumber, payload.otp)
    return VerifyOtpResponse(
        message="OTP verified successfully",
        access_token=create_access_token(data={"sub": payload.phoneNumber}),
    )
