from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..deps import build_identity_provider, get_session
from ..domain.errors import InvalidCredentialsError, InvalidRequestError, StorageFailureError, UserExistsError
from ..schemas import MessageResponse, SignInRequest, SignInResponse, SignUpRequest
from ..usecases import auth as auth_usecase
from ..utils.audit_log import emit_audit_log

router = APIRouter(prefix="", tags=["auth"])


@router.post("/signup", response_model=MessageResponse)
async def signup(
    payload: SignUpRequest,
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    identity = build_identity_provider(session, get_settings())
    try:
        async with session.begin():
            user = await auth_usecase.sign_up(
                identity,
                first_name=payload.first_name,
                last_name=payload.last_name,
                email=payload.email,
                password=payload.password,
            )
            try:
                emit_audit_log(action="user.signed_up", initiator="user", entity_id=user.id, user_id=user.id)
            except RuntimeError as exc:
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="failed to record signup",
                ) from exc
    except InvalidRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except UserExistsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists.") from exc
    except (StorageFailureError, SQLAlchemyError) as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage unavailable") from exc

    return MessageResponse(message="User created successfully.")


@router.post("/signin", response_model=SignInResponse)
async def signin(
    payload: SignInRequest,
    session: AsyncSession = Depends(get_session),
) -> SignInResponse:
    identity = build_identity_provider(session, get_settings())
    try:
        token = await auth_usecase.sign_in(identity, email=payload.email, password=payload.password)
    except InvalidRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageFailureError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage unavailable") from exc
    return SignInResponse(id_token=token)
