"""
Comercial Service

Creating a commercial takes two steps: the Supabase Auth user (email already
confirmed, temporary password) and then the `comerciales` profile row keyed by
the auth user id.

Author: TM3
Date: 2025-08-09
"""
import logging
from typing import Optional

from supabase import Client

from app.core.config import settings
from app.domain.comercial import Comercial, ComercialCreate
from app.repositories.comercial_repository import ComercialRepository

logger = logging.getLogger(__name__)


class ComercialService:
    def __init__(self, supabase: Client, comercial_repo: Optional[ComercialRepository] = None):
        self.supabase = supabase
        self.comercial_repo = comercial_repo or ComercialRepository()

    def create_comercial(self, data: ComercialCreate) -> Comercial:
        """
        Create the auth user and the profile row

        The profile insert failing removes the auth user again so the email
        can be reused.
        """
        response = self.supabase.auth.admin.create_user({
            "email": data.email,
            "password": settings.DEFAULT_COMERCIAL_PASSWORD,
            "email_confirm": True,
        })
        user_id = response.user.id
        logger.info(f"Auth user {user_id} created for {data.email}")

        try:
            return self.comercial_repo.create(user_id, data)
        except Exception as e:
            logger.error(f"Profile insert failed for {data.email}, removing auth user: {e}")
            self.supabase.auth.admin.delete_user(user_id)
            raise
