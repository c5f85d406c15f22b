# lessonhub/api_routes.py
from flask import Blueprint, request, jsonify, current_app, g, make_response
from .auth import TEACHER, PRINCIPAL_KINDS, public_record, principal_required, set_session_cookie, expire_session_cookie
from .errors import BadRequest
from .utils import read_upload
import logging

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)
video_bp = Blueprint('video', __name__)

KIND = '<any(student, teacher):kind>'


def service(name):
    return current_app.extensions['lessonhub'][name]


def request_data():
    """multipart 폼 또는 JSON 본문"""
    if request.form:
        return request.form
    return request.get_json(silent=True) or {}


def subjects_field(data):
    if hasattr(data, 'getlist'):
        values = data.getlist('subjects')
        if len(values) > 1:
            return values
    return data.get('subjects')


def session_response(kind, record, status):
    """토큰 쿠키와 함께 계정 응답"""
    token = service('tokens').issue(kind, record)
    response = make_response(jsonify({
        'message': record['id'],
        'id': record['id'],
        'userData': public_record(record)
    }), status)
    return set_session_cookie(response, token)


# ── 계정 ──

@auth_bp.route(f'/{KIND}/register', methods=['POST'])
def register(kind):
    """학생/교사 가입"""
    data = request_data()
    record = service('accounts').register(
        kind,
        username=data.get('username'),
        password=data.get('password'),
        email=data.get('email'),
        subjects=subjects_field(data) if kind == TEACHER else None,
        image=read_upload(request.files.get('profilePicture'))
    )
    return session_response(kind, record, 201)


@auth_bp.route(f'/{KIND}/login', methods=['POST'])
def login(kind):
    """학생은 username, 교사는 email 로 로그인"""
    data = request_data()
    identifier = data.get('email') if kind == TEACHER else data.get('username')
    record = service('accounts').login(kind, identifier, data.get('password'))
    return session_response(kind, record, 200)


@auth_bp.route(f'/{KIND}/logout', methods=['POST'])
def logout(kind):
    response = make_response(jsonify({'message': f'{kind.capitalize()} logged out successfully'}))
    return expire_session_cookie(response)


@auth_bp.route(f'/{KIND}/profile', methods=['GET', 'POST'])
@principal_required()
def get_profile(kind):
    return jsonify(service('accounts').get_profile(kind, g.claim))


@auth_bp.route(f'/{KIND}/profile', methods=['PUT'])
@principal_required()
def update_profile(kind):
    data = request_data()
    fields = {
        'username': data.get('username'),
        'email': data.get('email'),
        'password': data.get('password')
    }
    if kind == TEACHER and 'subjects' in data:
        fields['subjects'] = subjects_field(data)

    profile = service('accounts').update_profile(
        kind, g.claim, fields,
        image=read_upload(request.files.get('profileImage'))
    )
    return jsonify(profile)


@auth_bp.route(f'/{KIND}/profile', methods=['DELETE'])
@principal_required()
def delete_account(kind):
    service('accounts').delete_account(kind, g.claim)
    response = make_response(jsonify({'message': f'{kind.capitalize()} account deleted successfully'}))
    return expire_session_cookie(response)


@auth_bp.route('/send-email', methods=['POST'])
@principal_required(PRINCIPAL_KINDS)
def send_email():
    """메일 발송 (로그인한 학생/교사만)"""
    data = request.get_json(silent=True) or {}
    to = data.get('to')
    subject = data.get('subject')
    if not to or not subject:
        raise BadRequest('to and subject are required')

    try:
        service('mailer').send(to, subject, data.get('text'), data.get('html'))
    except Exception as e:
        logger.warning(f"send-email 실패 ({g.claim.kind} {g.claim.principal_id}): {e}")
        return jsonify({'status': 'error', 'message': 'Email not sent'}), 400
    return jsonify({'status': 'success', 'message': 'Email sent successfully'}), 200


# ── 비디오 ──

@video_bp.route('/upload-video', methods=['POST'])
@principal_required(TEACHER)
def upload_video():
    """비디오 + 썸네일 업로드"""
    summary = service('videos').upload(
        g.claim,
        title=request.form.get('title'),
        description=request.form.get('description'),
        category=request.form.get('category'),
        visibility=request.form.get('visibility'),
        video=read_upload(request.files.get('video')),
        thumbnail=read_upload(request.files.get('thumbnail'))
    )
    return jsonify({'message': 'Video uploaded successfully', 'video': summary}), 201


@video_bp.route('/videos', methods=['GET'])
def list_videos():
    return jsonify(service('videos').list_all())


@video_bp.route('/my-videos', methods=['GET'])
@principal_required(TEACHER)
def my_videos():
    return jsonify(service('videos').list_mine(g.claim))


@video_bp.route('/videos/<video_id>/like', methods=['POST'])
def like_video(video_id):
    """좋아요/취소 ({action: like|unlike})"""
    data = request.get_json(silent=True) or {}
    return jsonify(service('videos').toggle_like(video_id, data.get('action')))


@video_bp.route('/videos/<video_id>', methods=['DELETE'])
@principal_required(TEACHER)
def delete_video(video_id):
    service('videos').delete(g.claim, video_id)
    return jsonify({'message': 'Video deleted successfully'})
