from typing import Iterable, List, Optional
from creator_analytics.models.user import User
from creator_analytics.services.storage import storage_call, to_object_id

class UserStore:

    @storage_call()
    async def get(self, user_id) -> Optional[User]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await User.get(oid)

    @storage_call()
    async def find_by_email(self, email: str) -> Optional[User]:
        return await User.find_one({"email": email})

    @storage_call()
    async def list_all(self) -> List[User]:
        return await User.find_all().to_list()

    @storage_call("Email already registered")
    async def create(self, name: str, email: str, password_hash: str, role: str = "user") -> User:
        user = User(name=name, email=email, passwordHash=password_hash, role=role)
        await user.insert()
        return user

    @storage_call()
    async def save(self, user: User) -> User:
        await user.save()
        return user

    @storage_call()
    async def delete_by_emails(self, emails: Iterable[str]) -> None:
        await User.find({"email": {"$in": list(emails)}}).delete()
