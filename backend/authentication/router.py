from fastapi import APIRouter, Depends, status
from backend.authentication import schemas, utils, security
from backend.core.exceptions import NotFoundError

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate):
    record = utils.add_user(user, security.hash_password(user.password))
    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": utils.to_public(record), "token": security.token_for(record)},
    }


@router.post("/login", response_model=schemas.AuthResponse)
def login(credentials: schemas.UserLogin):
    user = security.verify_credentials(credentials.identifier, credentials.password)
    return {
        "success": True,
        "message": "Login successful",
        "data": {"user": utils.to_public(user), "token": security.token_for(user)},
    }


@router.post("/logout")
def logout(token: str = Depends(security.get_token), current_user=Depends(security.get_current_user)):
    utils.revoke_token(token, security.token_expiry(token))
    return {"success": True, "message": "Successfully logged out and token revoked."}


@router.get("/me", response_model=schemas.ProfileResponse)
def me(current_user: schemas.TokenData = Depends(security.get_current_user)):
    user = utils.get_user_by_id(current_user.user_id)
    if not user:
        raise NotFoundError("User")
    return {"success": True, "data": utils.to_public(user)}
