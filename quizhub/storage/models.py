from datetime import datetime

from quizhub import db


class StoredObject(db.Model):
    """Metadata for a file kept under UPLOAD_DIR/<bucket>/<path>."""
    __tablename__ = "stored_objects"

    id = db.Column(db.Integer, primary_key=True)
    bucket = db.Column(db.String(64), nullable=False, index=True)
    path = db.Column(db.String(512), nullable=False)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='SET NULL'), nullable=True, index=True)
    content_type = db.Column(db.String(100), nullable=False)
    size = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('bucket', 'path', name='uq_stored_objects_bucket_path'),
    )

    def __repr__(self) -> str:
        return f"<StoredObject {self.bucket}/{self.path}>"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'bucket': self.bucket,
            'path': self.path,
            'owner_id': self.owner_id,
            'content_type': self.content_type,
            'size': self.size,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
