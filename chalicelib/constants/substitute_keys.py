from_db = {
    'id_': 'id'
}

# empty value means the key is dropped on the way out
users_from_db = {
    **from_db,
    'password': None
}
