collection_pk = 'restora_{collection}'
collection_sk = '{record_id}'

menu_collection = 'menu'
reviews_collection = 'reviews'
reservations_collection = 'reservations'
sales_collection = 'sales'
users_collection = 'users'

all_collections = (
    menu_collection,
    reviews_collection,
    reservations_collection,
    sales_collection,
    users_collection
)
