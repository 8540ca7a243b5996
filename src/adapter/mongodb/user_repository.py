"""MongoDB implementation of UserRepository."""

from datetime import datetime, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.user import AuthProvider, User

logger = getLogger(__name__)

_EMAIL_SECRET_FIELDS = {'email_verification_secret': '', 'email_verification_expires_at': ''}
_PHONE_CODE_FIELDS = {'phone_verification_code': '', 'phone_verification_expires_at': ''}


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('phone_number', 1)], 'idx_users_phone_number', sparse=True)
            create_index_safe(
                self.collection, [('email_verification_secret', 1)], 'idx_users_email_secret', sparse=True,
            )
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            name=doc['name'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            last_login=doc.get('last_login'),
            password_hash=doc.get('password_hash'),
            provider=doc.get('provider', AuthProvider.EMAIL.value),
            federated_id=doc.get('federated_id'),
            avatar=doc.get('avatar'),
            phone_number=doc.get('phone_number'),
            email_verified=doc.get('email_verified', False),
            phone_verified=doc.get('phone_verified', False),
            email_verification_secret=doc.get('email_verification_secret'),
            email_verification_expires_at=doc.get('email_verification_expires_at'),
            phone_verification_code=doc.get('phone_verification_code'),
            phone_verification_expires_at=doc.get('phone_verification_expires_at'),
        )

    def _to_document(self, user: User) -> dict:
        doc = {
            '_id': user.id,
            'name': user.name,
            'email': user.email,
            'provider': user.provider,
            'email_verified': user.email_verified,
            'phone_verified': user.phone_verified,
            'created_at': user.created_at,
            'updated_at': user.updated_at,
        }
        # Optional fields are omitted rather than stored as null so sparse indexes skip them
        optional = {
            'password_hash': user.password_hash,
            'federated_id': user.federated_id,
            'avatar': user.avatar,
            'phone_number': user.phone_number,
            'email_verification_secret': user.email_verification_secret,
            'email_verification_expires_at': user.email_verification_expires_at,
            'phone_verification_code': user.phone_verification_code,
            'phone_verification_expires_at': user.phone_verification_expires_at,
        }
        doc.update({k: v for k, v in optional.items() if v is not None})
        return doc

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> User | None:
        """Insert a new user document and return the User."""
        try:
            self.collection.insert_one(self._to_document(user))
            logger.info("User created", extra={"userId": user.id, "provider": user.provider})
            return user
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": user.email})
            return None
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": user.email, "error": str(e)})
            return None

    def _update(self, query: dict, update: dict, action: str, user_id: str) -> bool:
        update.setdefault('$set', {})['updated_at'] = datetime.now(timezone.utc)
        try:
            result = self.collection.update_one(query, update)
            if result.matched_count == 0:
                logger.debug(f"No user matched for {action}", extra={"userId": user_id})
                return False
            return True
        except PyMongoError as e:
            logger.error(f"Failed to {action}", extra={"userId": user_id, "error": str(e)})
            return False

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        now = datetime.now(timezone.utc)
        return self._update(
            {'_id': user_id}, {'$set': {'last_login': now}}, 'update last_login', user_id,
        )

    def set_email_verification(self, user_id: str, secret: str, expires_at: datetime) -> bool:
        return self._update(
            {'_id': user_id},
            {'$set': {
                'email_verification_secret': secret,
                'email_verification_expires_at': expires_at,
            }},
            'set email verification',
            user_id,
        )

    def consume_email_verification(self, user_id: str, secret: str) -> bool:
        # Matching on the secret makes consumption single-use under concurrency
        return self._update(
            {'_id': user_id, 'email_verification_secret': secret},
            {'$set': {'email_verified': True}, '$unset': dict(_EMAIL_SECRET_FIELDS)},
            'consume email verification',
            user_id,
        )

    def set_phone_verification(
        self,
        user_id: str,
        code: str,
        expires_at: datetime,
        phone_number: str | None = None,
    ) -> bool:
        fields = {
            'phone_verification_code': code,
            'phone_verification_expires_at': expires_at,
        }
        if not self._update({'_id': user_id}, {'$set': fields}, 'set phone verification', user_id):
            return False
        if phone_number:
            # Matches a missing or null number only, so the first writer wins
            self._update(
                {'_id': user_id, 'phone_number': None},
                {'$set': {'phone_number': phone_number}},
                'assign phone number',
                user_id,
            )
        return True

    def consume_phone_verification(self, user_id: str, code: str) -> bool:
        return self._update(
            {'_id': user_id, 'phone_verification_code': code},
            {'$set': {'phone_verified': True}, '$unset': dict(_PHONE_CODE_FIELDS)},
            'consume phone verification',
            user_id,
        )

    def link_federated_identity(
        self,
        user_id: str,
        provider: str,
        federated_id: str,
        avatar: str | None = None,
    ) -> User | None:
        fields = {
            'provider': provider,
            'federated_id': federated_id,
            'email_verified': True,
            'updated_at': datetime.now(timezone.utc),
        }
        if avatar:
            fields['avatar'] = avatar
        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': fields},
                return_document=ReturnDocument.AFTER,
            )
            if doc:
                logger.info("Federated identity linked", extra={"userId": user_id, "provider": provider})
                return self._to_domain(doc)
            return None
        except PyMongoError as e:
            logger.error("Failed to link federated identity", extra={"userId": user_id, "error": str(e)})
            return None

    # ── read operations ──────────────────────────────────────

    def _find_one(self, query: dict, description: str) -> User | None:
        try:
            doc = self.collection.find_one(query)
            if doc:
                return self._to_domain(doc)
            return None
        except PyMongoError as e:
            logger.error(f"Failed to get user by {description}", extra={"error": str(e)})
            return None

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        return self._find_one({'email': email}, 'email')

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        return self._find_one({'_id': user_id}, 'ID')

    def get_by_phone_number(self, phone_number: str) -> User | None:
        return self._find_one({'phone_number': phone_number}, 'phone number')

    def get_by_email_verification_secret(self, secret: str) -> User | None:
        return self._find_one({'email_verification_secret': secret}, 'verification secret')
