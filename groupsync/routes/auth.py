"""
Authentication routes - register/login/logout.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..auth import authenticate_user, create_user_with_password
from ..dependencies import get_db, get_session_manager
from ..errors import Unauthorized

router = APIRouter(prefix="/api/auth")


class Credentials(BaseModel):
    email: str
    password: str
    name: Optional[str] = None


@router.post("/register", status_code=201)
async def register(credentials: Credentials, db=Depends(get_db)):
    """Create a password user and sign them in."""
    user = await create_user_with_password(
        db, credentials.email, credentials.password, credentials.name
    )
    response = JSONResponse(
        status_code=201,
        content={"user": {"id": user.id, "email": user.email, "name": user.name}},
    )
    get_session_manager().create_session(response, user.id)
    return response


@router.post("/login")
async def login(credentials: Credentials, db=Depends(get_db)):
    """Check credentials and set the session cookie."""
    user = await authenticate_user(db, credentials.email, credentials.password)
    if user is None:
        raise Unauthorized("Invalid email or password")
    
    response = JSONResponse(
        content={"user": {"id": user.id, "email": user.email, "name": user.name}}
    )
    get_session_manager().create_session(response, user.id)
    return response


@router.post("/logout")
async def logout():
    """Clear the session cookie."""
    response = JSONResponse(content={"message": "Signed out"})
    get_session_manager().clear_session(response)
    return response
