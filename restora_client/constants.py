import os

API_BASE = os.environ.get('RESTORA_API_BASE', 'http://127.0.0.1:8000')
STORAGE_DIR = os.environ.get('RESTORA_STORAGE_DIR', os.path.join(os.path.expanduser('~'), '.restora'))

# seconds
READ_TIMEOUT = 0.5
WRITE_TIMEOUT = 0.7
SYNC_INTERVAL = 10
DEBOUNCE_DELAY = 0.5
POST_MUTATION_DELAY = 0.3
GRACE_WINDOW = 10

STORAGE_KEYS = {
    'menu': 'restora_menu',
    'reviews': 'restora_reviews',
    'reservations': 'restora_reservations',
    'sales': 'restora_sales',
    'users': 'RestoraUsers'
}
CURRENT_USER_KEY = 'RestoraCurrentUser'
ADMIN_FLAG_KEY = 'isAdmin'

PATHS = {
    'menu': '/menu',
    'reviews': '/reviews',
    'reservations': '/reservations',
    'sales': '/sales',
    'users': '/users'
}

TRIGGER_PERIODIC = 'periodic'
TRIGGER_VISIBLE = 'visible'
TRIGGER_FOCUS = 'focus'
TRIGGER_POST_MUTATION = 'post_mutation'
TRIGGERS = (TRIGGER_PERIODIC, TRIGGER_VISIBLE, TRIGGER_FOCUS, TRIGGER_POST_MUTATION)

RESERVATION_STATUSES = ('pending', 'approved', 'rejected')
UNKNOWN_ITEM_NAME = 'Unknown'
DEFAULT_CATEGORY = 'Specials'
PLACEHOLDER_IMAGE = 'https://images.unsplash.com/photo-1504674900247-0877df9cc836?auto=format&fit=crop&w=400&q=60'
IMAGE_BASE_URL = 'https://raw.githubusercontent.com/JOKERKlNG/Restora/refs/heads/main'

# used only when the menu cache is empty and the server has not answered yet
DEFAULT_MENU = [
    {'name': 'Coq au Vin', 'price': 850, 'image': f'{IMAGE_BASE_URL}/French%20Food%201.png',
     'category': 'Main Course'},
    {'name': 'Bouillabaisse', 'price': 1200, 'image': f'{IMAGE_BASE_URL}/French%20Food%202.png',
     'category': 'Main Course'},
    {'name': 'Ratatouille', 'price': 650, 'image': f'{IMAGE_BASE_URL}/French%20Food%203.png',
     'category': 'Vegetarian'},
    {'name': 'Escargot', 'price': 750, 'image': f'{IMAGE_BASE_URL}/French%20Food%204.png',
     'category': 'Appetizer'},
    {'name': 'Crêpes', 'price': 450, 'image': f'{IMAGE_BASE_URL}/French%20Food%205.png',
     'category': 'Dessert'},
    {'name': 'French Onion Soup', 'price': 420, 'image': f'{IMAGE_BASE_URL}/French%20Food%206.png',
     'category': 'Soup'},
    {'name': 'Beef Bourguignon', 'price': 1100, 'image': f'{IMAGE_BASE_URL}/French%20Food%207.png',
     'category': 'Main Course'},
]

# demo accounts, the server never returns passwords so login is checked against the local users list
DEFAULT_USERS = [
    {'email': '123@gmail.com', 'password': 'asdfghjkl', 'name': '123', 'role': 'user',
     'favorites': [], 'avatarUrl': ''},
    {'email': 'admin@gmail.com', 'password': '12345678', 'name': 'Admin', 'role': 'admin',
     'favorites': [], 'avatarUrl': ''},
]
