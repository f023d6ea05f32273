# --- academy/model/user.py ---

from ..extensions import db

class User(db.Model):
    """Local mirror of identity-service users; only the role is consulted here."""
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(180), nullable=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    role = db.Column(db.String(50), nullable=False, default="user", index=True)  # roles: user, instructor, admin

    def as_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role
            }
