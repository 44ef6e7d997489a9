"""
Bucket definitions and their access policies.

An "owner folder" bucket only accepts writes under a first path segment
equal to the caller's user id, e.g. "42/avatar.png" for user 42.
"""
from dataclasses import dataclass

from quizhub.errors import NotFoundError

MB = 1024 * 1024

IMAGE_TYPES = frozenset({'image/jpeg', 'image/png', 'image/gif', 'image/webp'})
AUDIO_TYPES = frozenset({'audio/mpeg', 'audio/wav', 'audio/ogg', 'audio/mp4'})

OWNER_FOLDER = 'owner'
TUTORS = 'tutors'


@dataclass(frozen=True)
class Bucket:
    name: str
    max_size: int
    allowed_types: frozenset
    write_policy: str
    public: bool

    def allows_type(self, content_type: str | None) -> bool:
        return (content_type or '').split(';')[0].strip().lower() in self.allowed_types

    def can_write(self, caller, path: str) -> bool:
        if caller is None:
            return False
        if caller.is_super_tutor:
            return True
        if self.write_policy == TUTORS:
            return caller.is_tutor_or_admin
        return is_owner_path(caller, path)

    def can_read(self, caller, path: str) -> bool:
        if self.public:
            return True
        if caller is None:
            return False
        return caller.is_tutor_or_admin or is_owner_path(caller, path)


def is_owner_path(caller, path: str) -> bool:
    segments = path.split('/')
    return len(segments) > 1 and segments[0] == str(caller.id)


BUCKETS = {
    bucket.name: bucket for bucket in (
        Bucket('avatars', 5 * MB, IMAGE_TYPES, OWNER_FOLDER, public=True),
        Bucket('question-images', 10 * MB, IMAGE_TYPES | {'image/svg+xml'}, TUTORS, public=True),
        Bucket('question-audio', 50 * MB, AUDIO_TYPES, TUTORS, public=True),
        Bucket('feedback-files', 10 * MB, IMAGE_TYPES | {'application/pdf', 'text/plain'}, OWNER_FOLDER, public=False),
    )
}


def get_bucket(name: str) -> Bucket:
    bucket = BUCKETS.get(name)
    if bucket is None:
        raise NotFoundError("Bucket not found")
    return bucket
