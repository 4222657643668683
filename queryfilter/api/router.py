from fastapi import APIRouter
from queryfilter.api import users

router = APIRouter()
router.include_router(users.router, prefix="/users", tags=["Users"])
