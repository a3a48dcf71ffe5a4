from typing import Dict, Optional

from restora_client import constants
from restora_client.storage import LocalCache, Storage, MemoryStorage


class Session:
    """
    Current user and admin flag.

    The admin flag exists in both the durable and the session scope, either one
    set to ``"true"`` makes the client an admin.
    """

    def __init__(self, durable: Storage, session_scope: Storage = None):
        self.durable = durable
        self.session_scope = session_scope or MemoryStorage()
        self._cache = LocalCache(durable)

    @property
    def current_user(self) -> Optional[Dict]:
        return self._cache.read_record(constants.CURRENT_USER_KEY)

    def save_current_user(self, user: Dict):
        self._cache.write_record(constants.CURRENT_USER_KEY, user)

    def is_admin(self) -> bool:
        return 'true' in (self.durable.get_item(constants.ADMIN_FLAG_KEY),
                          self.session_scope.get_item(constants.ADMIN_FLAG_KEY))

    def set_admin(self, is_admin: bool):
        if is_admin:
            self.durable.set_item(constants.ADMIN_FLAG_KEY, 'true')
            self.session_scope.set_item(constants.ADMIN_FLAG_KEY, 'true')
        else:
            self.durable.set_item(constants.ADMIN_FLAG_KEY, 'false')
            self.session_scope.remove_item(constants.ADMIN_FLAG_KEY)

    def normalize_admin_flag(self):
        if self.durable.get_item(constants.ADMIN_FLAG_KEY) not in ('true', 'false'):
            self.durable.set_item(constants.ADMIN_FLAG_KEY, 'false')

    def login(self, user: Dict):
        self.save_current_user(user)
        self.set_admin(user.get('role') == 'admin')

    def logout(self):
        self._cache.remove(constants.CURRENT_USER_KEY)
        self.set_admin(False)
