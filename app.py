from chalice import Chalice

from chalicelib import menu_items, reviews, reservations, sales, users
from chalicelib.utils import app as utils_app

app = Chalice(app_name='restora')

app.debug = True

http_methods = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE')


def unsupported_methods(allowed_methods):
    return [method for method in http_methods if method not in allowed_methods]


def method_not_allowed(allowed_methods):
    return utils_app.method_not_allowed(app.current_request.method, allowed_methods)


@app.route('/health-check', methods=['GET'], cors=True)
def health_check():
    return {'health': 'check'}


# MENU
@app.route('/menu', methods=['GET'], cors=True)
def get_menu():
    return menu_items.MenuItem.endpoint_get_menu_items(app.current_request)


@app.route('/menu', methods=['POST'], cors=True)
def create_menu_item():
    """
    admin operation, the client may send its own id
    """
    return menu_items.MenuItem.endpoint_create_menu_item(app.current_request)


@app.route('/menu', methods=['PUT'], cors=True)
def update_menu_item():
    """
    admin operation, ?id= is required, body is a partial patch
    """
    return menu_items.MenuItem.endpoint_update_menu_item(app.current_request)


@app.route('/menu', methods=['DELETE'], cors=True)
def delete_menu_item():
    """
    admin operation, ?id= is required
    """
    return menu_items.MenuItem.endpoint_delete_menu_item(app.current_request)


@app.route('/menu', methods=unsupported_methods(menu_items.allowed_methods), cors=True)
def menu_method_not_allowed():
    return method_not_allowed(menu_items.allowed_methods)


# REVIEWS
@app.route('/reviews', methods=['GET'], cors=True)
def get_reviews():
    return reviews.Review.endpoint_get_reviews(app.current_request)


@app.route('/reviews', methods=['POST'], cors=True)
def create_review():
    return reviews.Review.endpoint_create_review(app.current_request)


@app.route('/reviews', methods=['DELETE'], cors=True)
def delete_review():
    """
    admin operation, ?id= is required
    """
    return reviews.Review.endpoint_delete_review(app.current_request)


@app.route('/reviews', methods=unsupported_methods(reviews.allowed_methods), cors=True)
def reviews_method_not_allowed():
    return method_not_allowed(reviews.allowed_methods)


# RESERVATIONS
@app.route('/reservations', methods=['GET'], cors=True)
def get_reservations():
    return reservations.Reservation.endpoint_get_reservations(app.current_request)


@app.route('/reservations', methods=['POST'], cors=True)
def create_reservation():
    return reservations.Reservation.endpoint_create_reservation(app.current_request)


@app.route('/reservations', methods=['PATCH'], cors=True)
def update_reservation_status():
    """
    admin operation, ?id= is required, body is {"status": "pending" | "approved" | "rejected"}
    """
    return reservations.Reservation.endpoint_update_status(app.current_request)


@app.route('/reservations', methods=['DELETE'], cors=True)
def delete_reservations():
    """
    admin operation, ?id= deletes one reservation, no id clears all reservations
    """
    return reservations.Reservation.endpoint_delete_reservations(app.current_request)


@app.route('/reservations', methods=unsupported_methods(reservations.allowed_methods), cors=True)
def reservations_method_not_allowed():
    return method_not_allowed(reservations.allowed_methods)


# SALES
@app.route('/sales', methods=['GET'], cors=True)
def get_sales():
    return sales.Sale.endpoint_get_sales(app.current_request)


@app.route('/sales', methods=['POST'], cors=True)
def create_sale():
    return sales.Sale.endpoint_create_sale(app.current_request)


@app.route('/sales', methods=unsupported_methods(sales.allowed_methods), cors=True)
def sales_method_not_allowed():
    return method_not_allowed(sales.allowed_methods)


# USERS
@app.route('/users', methods=['GET'], cors=True)
def get_users():
    """
    passwords are never returned
    """
    return users.User.endpoint_get_users(app.current_request)


@app.route('/users', methods=['POST'], cors=True)
def create_user():
    """
    sign up, 409 if the email is already registered
    """
    return users.User.endpoint_create_user(app.current_request)


@app.route('/users', methods=unsupported_methods(users.allowed_methods), cors=True)
def users_method_not_allowed():
    return method_not_allowed(users.allowed_methods)
