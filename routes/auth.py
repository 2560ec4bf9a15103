from core.imports import Blueprint, jsonify, request, create_access_token, jwt_required, get_jwt_identity, current_app
from core.extensions import bcrypt
from core.store import get_store, USERS

auth_bp = Blueprint('auth', __name__)


def find_user_by_email(store, email):
    email = (email or "").strip().lower()
    for user in store.list(USERS):
        if (user.get("email") or "").lower() == email:
            return user
    return None


def public_user(user):
    return {
        "id": user["id"],
        "email": user.get("email"),
        "role": user.get("role", "user"),
        "isAdmin": user.get("role") == "admin",
    }


def create_user(store, email, raw_password, role="user"):
    hashed_password = bcrypt.generate_password_hash(raw_password).decode('utf-8')
    user_id = store.add(USERS, {
        "email": email.strip().lower(),
        "password": hashed_password,
        "role": role,
        "isAdmin": role == "admin",
    })
    return store.get(USERS, user_id)


def seed_admin_user():
    store = get_store()
    email = current_app.config.get("ADMIN_EMAIL")
    raw_password = current_app.config.get("ADMIN_PASSWORD")
    if not raw_password:
        print("ℹ️ ADMIN_PASSWORD not set, skipping admin seed.")
        return None

    user = find_user_by_email(store, email)
    if not user:
        user = create_user(store, email, raw_password, role="admin")
        print(f"✅ Admin user created (email={email})")
    else:
        print("ℹ️ Admin user already exists.")
    return user


@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    """
    Staff login
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - email
            - password
          properties:
            email:
              type: string
              example: "admin@example.com"
            password:
              type: string
              example: "secret"
    responses:
      200:
        description: Login successful, returns a JWT access token
      400:
        description: Email and password are required
      401:
        description: Invalid credentials
    """
    data = request.get_json(silent=True) or {}
    email = data.get('email')
    password = data.get('password')

    if not email or not password:
        return jsonify({"message": "Email and password are required"}), 400

    user = find_user_by_email(get_store(), email)
    if not user or not bcrypt.check_password_hash(user.get("password", ""), password):
        return jsonify({"message": "Invalid credentials"}), 401

    access_token = create_access_token(
        identity=str(user["id"]),
        additional_claims={"role": user.get("role", "user")}
    )

    return jsonify({
        "message": "Login successful",
        "access_token": access_token,
        "user": public_user(user)
    }), 200


@auth_bp.route('/api/auth/me', methods=['GET'])
@jwt_required()
def me():
    user = get_store().get(USERS, get_jwt_identity())
    if not user:
        return jsonify({"message": "User not found"}), 404
    return jsonify({"user": public_user(user)}), 200
