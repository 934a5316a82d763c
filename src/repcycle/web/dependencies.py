"""Request dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from ..services.context import AppContext


def get_context(request: Request) -> AppContext:
    """Services attached to the running app."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready",
        )
    return context


Context = Annotated[AppContext, Depends(get_context)]
