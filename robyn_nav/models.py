import hashlib
import hmac
import os
from typing import Optional

from tortoise import fields
from tortoise.models import Model

PASSWORD_ITERATIONS = 260000


class AdminUser(Model):
    """后台用户，菜单权限回调通过 request.user 拿到它"""
    id = fields.IntField(primary_key=True)
    username = fields.CharField(max_length=50, unique=True)
    password = fields.CharField(max_length=256)
    email = fields.CharField(max_length=100, null=True)
    is_active = fields.BooleanField(default=True)
    is_superuser = fields.BooleanField(default=False)
    roles = fields.JSONField(default=list)
    permissions = fields.JSONField(default=list)
    last_login = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "robyn_nav_admin_user"

    @staticmethod
    def hash_password(password: str, salt: Optional[str] = None) -> str:
        """pbkdf2_sha256$<iterations>$<salt>$<hash>"""
        salt = salt or os.urandom(8).hex()
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), PASSWORD_ITERATIONS)
        return f"pbkdf2_sha256${PASSWORD_ITERATIONS}${salt}${digest.hex()}"

    def check_password(self, password: str) -> bool:
        try:
            algorithm, iterations, salt, expected = self.password.split("$", 3)
        except ValueError:
            return False
        if algorithm != "pbkdf2_sha256":
            return False
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), int(iterations))
        return hmac.compare_digest(digest.hex(), expected)

    @classmethod
    async def authenticate(cls, username: str, password: str) -> Optional["AdminUser"]:
        user = await cls.filter(username=username, is_active=True).first()
        if user and user.check_password(password):
            return user
        return None

    def has_role(self, role: str) -> bool:
        return self.is_superuser or role in (self.roles or [])

    def has_perm(self, permission: str) -> bool:
        """超级用户拥有全部权限"""
        if self.is_superuser:
            return True
        return permission in (self.permissions or [])

    def __str__(self) -> str:
        return self.username
