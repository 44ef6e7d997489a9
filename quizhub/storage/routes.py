from flask import request, send_file
from flask_login import login_required

from quizhub.common.access import get_caller, get_optional_caller
from quizhub.common.responses import success
from quizhub.storage import storage_bp
from quizhub.storage import service


@storage_bp.route('/objects/<bucket_name>/<path:path>', methods=['POST'])
@login_required
def upload_object(bucket_name, path):
    """
    Upload a file as multipart form data under the "file" field.
    """
    result = service.upload_object(get_caller(), bucket_name, path, request.files.get('file'))
    return success(result, 201, message='Upload successful')


@storage_bp.route('/objects/<bucket_name>/<path:path>', methods=['GET'])
def download_object(bucket_name, path):
    full_path, stored = service.open_object(get_optional_caller(), bucket_name, path)
    return send_file(full_path, mimetype=stored.content_type, max_age=0)


@storage_bp.route('/objects/<bucket_name>/<path:path>', methods=['DELETE'])
@login_required
def delete_object(bucket_name, path):
    service.delete_object(get_caller(), bucket_name, path)
    return success(None, message='Object deleted')


@storage_bp.route('/public-url/<bucket_name>/<path:path>', methods=['GET'])
def public_url(bucket_name, path):
    return success(service.get_public_url(bucket_name, path))
