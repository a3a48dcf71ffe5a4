IMAGE_BASE_URL = 'https://raw.githubusercontent.com/JOKERKlNG/Restora/refs/heads/main'
PLACEHOLDER_IMAGE = 'https://images.unsplash.com/photo-1504674900247-0877df9cc836?auto=format&fit=crop&w=400&q=60'
DEFAULT_CATEGORY = 'Specials'

MENU = [
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

USERS = [
    {'email': '123@gmail.com', 'password': 'asdfghjkl', 'name': '123', 'role': 'user'},
    {'email': 'admin@gmail.com', 'password': '12345678', 'name': 'Admin', 'role': 'admin'},
]
