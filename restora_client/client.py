import asyncio
import secrets
from typing import Callable, Dict, List, Optional
from urllib.parse import quote
from uuid import uuid4

from restora_client import constants, render
from restora_client.exceptions import ValidationError, RecordNotFound, NotLoggedIn
from restora_client.logger import client_logger
from restora_client.reconciler import Reconciler, Policy, now_ms
from restora_client.remote import RemoteAccessLayer
from restora_client.scheduler import SyncScheduler
from restora_client.session import Session
from restora_client.storage import LocalCache, MemoryStorage, Storage


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_filled(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def by_email(record: Dict):
    return record.get('email')


class RestoraClient:
    """
    One device: local cache, remote access, scheduler, session and a reconciler per entity kind.

    Every mutation validates, writes the local cache, renders, then calls the
    server in the background and schedules a sync of that kind once the call is done.
    ``output(kind, text)`` receives the text renders.
    """

    def __init__(self, remote: RemoteAccessLayer = None, durable: Storage = None, session_scope: Storage = None,
                 scheduler: SyncScheduler = None, output: Optional[Callable[[str, str], None]] = None,
                 clock: Callable[[], int] = now_ms, client_id: str = None):
        self.client_id = client_id or uuid4().hex[:8]
        self.logger = client_logger(self.client_id)
        self.remote = remote or RemoteAccessLayer()
        self.durable = durable or MemoryStorage()
        self.cache = LocalCache(self.durable)
        self.session = Session(self.durable, session_scope)
        self.scheduler = scheduler or SyncScheduler()
        self.remote.logger = self.scheduler.logger = self.logger
        self.output = output
        self.clock = clock

        common = dict(cache=self.cache, remote=self.remote, clock=clock, spawn=self.scheduler.spawn, logger=self.logger)
        self.menu = Reconciler('menu', policy=Policy.REPLACE_WITH_REMOTE, created_field='createdAt',
                               fingerprint_fields=('name', 'price', 'image', 'category'),
                               renderer=self._render_menu, **common)
        self.reviews = Reconciler('reviews', policy=Policy.REPLACE_WITH_REMOTE, order_by='timestamp',
                                  created_field='timestamp', fingerprint_fields=('timestamp',),
                                  renderer=self._render_reviews, **common)
        self.reservations = Reconciler('reservations', policy=Policy.REPLACE_WITH_REMOTE, order_by='createdAt',
                                       created_field='createdAt', fingerprint_fields=('status',),
                                       renderer=self._render_reservations, **common)
        self.sales = Reconciler('sales', policy=Policy.WRITE_THROUGH, **common)
        self.users = Reconciler('users', policy=Policy.WRITE_THROUGH, id_getter=by_email,
                                fingerprint_fields=('name', 'role'), renderer=self._render_users, **common)
        self.reconcilers = (self.menu, self.reviews, self.reservations, self.sales, self.users)

    # renderers
    def _emit(self, kind, text):
        if self.output is not None:
            self.output(kind, text)

    def _render_menu(self, menu):
        user = self.session.current_user or {}
        self._emit('menu', render.render_menu(menu, self.reviews.read_local(), user.get('favorites') or ()))

    async def _render_reviews(self, reviews):
        self._emit('reviews', render.render_reviews(reviews))
        # menu ratings are averaged from the reviews
        await self.menu.render(force=True)

    def _render_reservations(self, reservations):
        if self.session.is_admin():
            self._emit('reservations', render.render_reservations(reservations))

    def _render_users(self, users):
        self._emit('users', render.render_users(users))

    # lifecycle
    async def start(self, periodic: bool = True):
        self.session.normalize_admin_flag()
        if not self.menu.read_local():
            self.cache.write(self.menu.storage_key,
                             [{'id': f'default-{index}', **item} for index, item in enumerate(constants.DEFAULT_MENU, 1)])
        if not self.users.read_local():
            self.cache.write(self.users.storage_key, constants.DEFAULT_USERS)
        # rendering the reviews renders the menu too
        for reconciler in (self.reviews, self.reservations):
            await reconciler.render(force=True)

        for trigger in (constants.TRIGGER_PERIODIC, constants.TRIGGER_VISIBLE, constants.TRIGGER_FOCUS):
            self.scheduler.register(trigger, self.sync_all)
        await self.sync_all()
        if periodic:
            self.scheduler.start()
        self.logger.info(f"RestoraClient.start ::: started against {self.remote.api_base}")

    async def stop(self):
        await self.scheduler.stop()
        self.remote.close()
        self.logger.info("RestoraClient.stop ::: stopped")

    async def drain(self):
        await self.scheduler.drain()

    async def sync_all(self) -> Dict[str, bool]:
        reconcilers = [self.menu, self.reviews]
        if self.session.is_admin():
            reconcilers.append(self.reservations)
        results = await asyncio.gather(*(reconciler.sync() for reconciler in reconcilers))
        return {reconciler.kind: result for reconciler, result in zip(reconcilers, results)}

    def on_visibility_change(self, hidden: bool):
        self.scheduler.on_visibility_change(hidden)

    def on_focus(self):
        self.scheduler.on_focus()

    def _push(self, reconciler: Reconciler, call: Callable):
        """
        Background server call followed by a post-mutation sync of the same kind.
        """
        async def push():
            await call()
            if reconciler.policy is not Policy.WRITE_THROUGH:
                self.scheduler.after_mutation(reconciler.kind, reconciler.sync)
        return push

    @staticmethod
    def _by_id(path, record_id):
        return f'{path}?id={quote(str(record_id))}'

    # menu
    async def save_menu_item(self, item: Dict) -> Dict:
        if not is_filled(item.get('name')):
            raise ValidationError('name is required')
        if not is_number(item.get('price')) or item['price'] <= 0:
            raise ValidationError('price must be a positive number')

        fields = {
            'name': item['name'].strip(),
            'price': item['price'],
            'image': item.get('image') or constants.PLACEHOLDER_IMAGE,
            'category': item.get('category') or constants.DEFAULT_CATEGORY
        }
        existing = self.menu.find(item['id']) if item.get('id') else None
        if existing is not None:
            path = self._by_id(self.menu.path, existing['id'])
            return await self.menu.update_record(
                existing['id'], fields, self._push(self.menu, lambda: self.remote.put(path, fields)))

        record = {'id': item.get('id') or str(uuid4()), **fields, 'createdAt': self.clock()}
        return await self.menu.upsert(record, self._push(self.menu, lambda: self.remote.post(self.menu.path, record)))

    async def delete_menu_item(self, item_id: str) -> Dict:
        path = self._by_id(self.menu.path, item_id)
        return await self.menu.remove(item_id, self._push(self.menu, lambda: self.remote.delete(path)))

    # reviews
    async def submit_review(self, item_id: str, rating: int, reviewer_name: str, text: str) -> Dict:
        if not item_id or not is_filled(reviewer_name) or not is_filled(text):
            raise ValidationError('item, reviewer name and review text are required')
        if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
            raise ValidationError('rating must be an integer from 1 to 5')

        item = self.menu.find(item_id)
        body = {'id': str(uuid4()), 'itemId': item_id, 'rating': rating,
                'reviewerName': reviewer_name.strip(), 'text': text.strip()}
        record = {**body, 'itemName': item['name'] if item else constants.UNKNOWN_ITEM_NAME,
                  'timestamp': self.clock()}
        await self.reviews.upsert(record, self._push(self.reviews, lambda: self.remote.post(self.reviews.path, body)))
        return record

    async def delete_review(self, review_id: str) -> Dict:
        path = self._by_id(self.reviews.path, review_id)
        removed = await self.reviews.remove(review_id, self._push(self.reviews, lambda: self.remote.delete(path)))
        return removed

    # reservations
    async def make_reservation(self, name: str, phone: str, guests: int, date: str, time: str,
                               occasion: str = '', notes: str = '') -> Dict:
        if not all(is_filled(value) for value in (name, phone, date, time)):
            raise ValidationError('name, phone, guests, date and time are required for a reservation')
        if not isinstance(guests, int) or isinstance(guests, bool) or guests <= 0:
            raise ValidationError('guests must be a positive integer')

        user = self.session.current_user or {}
        body = {'id': str(uuid4()), 'name': name.strip(), 'phone': phone.strip(), 'guests': guests,
                'date': date, 'time': time, 'occasion': occasion or '', 'notes': notes or '',
                'userEmail': user.get('email')}
        record = {**body, 'createdAt': self.clock(), 'status': 'pending'}
        return await self.reservations.upsert(
            record, self._push(self.reservations, lambda: self.remote.post(self.reservations.path, body)))

    async def set_reservation_status(self, reservation_id: str, status: str) -> Dict:
        if status not in constants.RESERVATION_STATUSES:
            raise ValidationError(f'status must be one of {", ".join(constants.RESERVATION_STATUSES)}')
        path = self._by_id(self.reservations.path, reservation_id)
        return await self.reservations.update_record(
            reservation_id, {'status': status},
            self._push(self.reservations, lambda: self.remote.patch(path, {'status': status})))

    async def delete_reservation(self, reservation_id: str) -> Dict:
        path = self._by_id(self.reservations.path, reservation_id)
        return await self.reservations.remove(
            reservation_id, self._push(self.reservations, lambda: self.remote.delete(path)))

    async def clear_reservations(self):
        await self.reservations.write_through(
            [], self._push(self.reservations, lambda: self.remote.delete(self.reservations.path)))

    # sales
    async def record_sale(self, items: List[Dict], total) -> Dict:
        if not isinstance(items, list) or not is_number(total):
            raise ValidationError('items (array) and total (number) are required')
        timestamp = self.clock()
        record = {'id': f'{timestamp}-{secrets.token_hex(6)}', 'timestamp': timestamp, 'total': total, 'items': items}
        body = {'items': items, 'total': total}
        return await self.sales.upsert(record, self._push(self.sales, lambda: self.remote.post(self.sales.path, body)))

    # users
    async def signup(self, email: str, password: str, name: str) -> Dict:
        if not all(is_filled(value) for value in (email, password, name)):
            raise ValidationError('email, password and name are required')
        email = email.strip().lower()
        if self.users.find(email) is not None:
            raise ValidationError('User already exists')

        user = {'email': email, 'password': password, 'name': name.strip(), 'role': 'user',
                'favorites': [], 'avatarUrl': ''}
        body = {'email': email, 'password': password, 'name': user['name']}
        await self.users.upsert(user, self._push(self.users, lambda: self.remote.post(self.users.path, body)))
        self.session.login(user)
        return user

    async def login(self, email: str, password: str) -> Dict:
        user = self.users.find((email or '').strip().lower())
        if user is None or user.get('password') != password:
            raise ValidationError('Invalid email or password')
        self.session.login(user)
        await self.menu.render(force=True)
        await self.reservations.render(force=True)
        self.logger.info(f"RestoraClient.login ::: {user['email']} logged in, admin={self.session.is_admin()}")
        return user

    async def logout(self):
        self.session.logout()
        await self.menu.render(force=True)

    def _require_user(self) -> Dict:
        user = self.session.current_user
        if user is None:
            raise NotLoggedIn('log in first')
        return user

    async def _save_user(self, user: Dict) -> Dict:
        if self.users.find(user['email']) is not None:
            await self.users.update_record(user['email'], user)
        else:
            await self.users.upsert(user)
        self.session.save_current_user(user)
        return user

    async def update_profile(self, name: str, avatar_url: str = '') -> Dict:
        user = self._require_user()
        if not is_filled(name):
            raise ValidationError('name is required')
        return await self._save_user({**user, 'name': name.strip(), 'avatarUrl': (avatar_url or '').strip()})

    async def toggle_favorite(self, item_id: str) -> Dict:
        user = self._require_user()
        if self.menu.find(item_id) is None:
            raise RecordNotFound(f'menu record {item_id} was not found')
        favorites = list(user.get('favorites') or [])
        if item_id in favorites:
            favorites.remove(item_id)
        else:
            favorites.append(item_id)
        user = await self._save_user({**user, 'favorites': favorites})
        await self.menu.render(force=True)
        return user

    async def refresh_users(self) -> bool:
        return await self.users.sync(policy=Policy.UNION_MERGE)
