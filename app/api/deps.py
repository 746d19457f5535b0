from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.core.context import ActorContext
from app.core.exceptions import AuthorizationError
from app.core.security import decode_token
from app.models.user import User

security = HTTPBearer()

def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise credentials_exception

    user = db.get(User, int(subject))
    if user is None:
        raise credentials_exception

    return user

def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user

def get_actor_context(
    current_user: User = Depends(get_current_active_user)
) -> ActorContext:
    """Login gate: the acting user as an explicit context value."""
    return ActorContext(id=current_user.id, is_admin=bool(current_user.is_admin))

def require_admin(
    actor: ActorContext = Depends(get_actor_context)
) -> ActorContext:
    if not actor.is_admin:
        raise AuthorizationError("Admins only")
    return actor
