"""
Test cases for bucketed object storage.
"""
import io

import pytest

from quizhub.errors import ValidationError
from quizhub.storage.service import normalize_path

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64


def _upload(client, bucket, path, data=PNG_BYTES, filename='image.png', content_type='image/png'):
    return client.post(
        f'/api/storage/objects/{bucket}/{path}',
        data={'file': (io.BytesIO(data), filename, content_type)},
        content_type='multipart/form-data',
    )


class TestUpload:

    def test_avatar_in_own_folder(self, client, users, login):
        login('alice')
        response = _upload(client, 'avatars', f"{users['student']}/me.png")
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['path'] == f"{users['student']}/me.png"
        assert data['size'] == len(PNG_BYTES)
        assert data['url'] == f"/api/storage/objects/avatars/{users['student']}/me.png"

    def test_avatar_in_someone_elses_folder(self, client, users, login):
        login('alice')
        response = _upload(client, 'avatars', f"{users['other_student']}/me.png")
        assert response.status_code == 403

    def test_owner_folder_needs_a_folder(self, client, users, login):
        login('alice')
        assert _upload(client, 'avatars', f"{users['student']}").status_code == 403

    def test_no_overwrite(self, client, users, login):
        login('alice')
        path = f"{users['student']}/me.png"
        _upload(client, 'avatars', path)
        response = _upload(client, 'avatars', path)
        assert response.status_code == 409
        assert response.get_json()['error'] == 'The resource already exists'

    def test_content_type_checked(self, client, users, login):
        login('alice')
        response = _upload(client, 'avatars', f"{users['student']}/notes.pdf",
                           data=b'%PDF-1.4', filename='notes.pdf', content_type='application/pdf')
        assert response.status_code == 400

    def test_size_limit(self, client, users, login):
        login('alice')
        too_big = b'\x00' * (5 * 1024 * 1024 + 1)
        response = _upload(client, 'avatars', f"{users['student']}/big.png", data=too_big)
        assert response.status_code == 413
        assert response.get_json()['error'] == 'The object exceeded the maximum allowed size'

    def test_question_images_need_tutor(self, client, users, login):
        login('alice')
        assert _upload(client, 'question-images', 'q1/diagram.png').status_code == 403

        login('tina')
        assert _upload(client, 'question-images', 'q1/diagram.png').status_code == 201

    def test_super_tutor_writes_anywhere(self, client, users, login):
        login('sam')
        response = _upload(client, 'avatars', f"{users['student']}/set-by-admin.png")
        assert response.status_code == 201

    def test_unknown_bucket(self, client, users, login):
        login('sam')
        assert _upload(client, 'secrets', 'a/b.png').status_code == 404

    def test_missing_file_field(self, client, users, login):
        login('tina')
        response = client.post('/api/storage/objects/question-images/q1/x.png', data={'note': 'x'},
                               content_type='multipart/form-data')
        assert response.status_code == 400
        assert response.get_json()['error'] == 'No file provided'


class TestDownloadAndDelete:

    def test_public_bucket_readable_without_login(self, client, users, login):
        login('alice')
        path = f"{users['student']}/me.png"
        _upload(client, 'avatars', path)
        client.post('/api/auth/logout')

        response = client.get(f'/api/storage/objects/avatars/{path}')
        assert response.status_code == 200
        assert response.data == PNG_BYTES
        assert response.mimetype == 'image/png'
        assert response.headers['X-Frame-Options'] == 'SAMEORIGIN'

    def test_feedback_files_are_private(self, client, users, login):
        login('alice')
        path = f"{users['student']}/essay.txt"
        response = _upload(client, 'feedback-files', path, data=b'my essay',
                           filename='essay.txt', content_type='text/plain')
        assert response.status_code == 201
        assert client.get(f'/api/storage/objects/feedback-files/{path}').status_code == 200

        login('bob')
        assert client.get(f'/api/storage/objects/feedback-files/{path}').status_code == 403

        login('tina')
        assert client.get(f'/api/storage/objects/feedback-files/{path}').data == b'my essay'

        client.post('/api/auth/logout')
        assert client.get(f'/api/storage/objects/feedback-files/{path}').status_code == 401

    def test_missing_object(self, client):
        response = client.get('/api/storage/objects/avatars/1/none.png')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Object not found'

    def test_delete_then_upload_again(self, client, users, login):
        login('alice')
        path = f"{users['student']}/me.png"
        _upload(client, 'avatars', path)

        login('bob')
        assert client.delete(f'/api/storage/objects/avatars/{path}').status_code == 403

        login('alice')
        assert client.delete(f'/api/storage/objects/avatars/{path}').status_code == 200
        assert client.get(f'/api/storage/objects/avatars/{path}').status_code == 404
        assert _upload(client, 'avatars', path).status_code == 201

    def test_public_url(self, client):
        response = client.get('/api/storage/public-url/question-audio/q1/clip.mp3')
        assert response.status_code == 200
        assert response.get_json()['data'] == {'publicUrl': '/api/storage/objects/question-audio/q1/clip.mp3'}

        assert client.get('/api/storage/public-url/feedback-files/1/essay.txt').status_code == 400


class TestNormalizePath:

    def test_keeps_safe_paths(self):
        assert normalize_path('12/avatar.png') == '12/avatar.png'

    def test_cleans_segments(self):
        assert normalize_path('12/my photo.png') == '12/my_photo.png'

    @pytest.mark.parametrize('path', ['../etc/passwd', '12/../../x', '/abs/path', '12//x', 'a\\b', '', '12/.'])
    def test_rejects_traversal_and_empty_segments(self, path):
        with pytest.raises(ValidationError):
            normalize_path(path)
