import logging
from datetime import date

from flask import Blueprint, current_app, jsonify, request, send_file
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import RequestEntityTooLarge

from models import db
from models.pegawai import STATUS_OPTIONS
from services.errors import NotFoundError, PegawaiError, UploadError
from services.excel import allowed_file, export_workbook, import_workbook
from services.pegawai_store import (REQUIRED_MESSAGE, aggregate_by_rank,
                                    aggregate_by_unit, count_pegawai,
                                    create_pegawai, delete_pegawai,
                                    get_pegawai, list_pegawai, unit_options,
                                    update_pegawai)
from services.upload import NO_FILE_MESSAGE, simpan_upload

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__, url_prefix='/api')

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def error_response(message, status_code):
    return jsonify({'error': message}), status_code


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _missing_required(data):
    return not data.get('nip') or not data.get('name')


def _filters():
    search = request.args.get('search', '').strip()
    unit = request.args.get('unit', '').strip()
    return search or None, unit or None


def _uploaded_file():
    field = current_app.config['UPLOAD_FIELD']
    try:
        return request.files.get(field)
    except RequestEntityTooLarge as e:
        raise UploadError('File terlalu besar.') from e


# --- Rute Pegawai ---
@api_bp.route('/employees', methods=['GET'])
def daftar_pegawai():
    search, unit = _filters()
    return jsonify([p.to_dict() for p in list_pegawai(search=search, unit=unit)])


@api_bp.route('/employees/<int:id>', methods=['GET'])
def detail_pegawai(id):
    try:
        pegawai = get_pegawai(id)
    except NotFoundError:
        return error_response('Employee not found', 404)
    return jsonify(pegawai.to_dict())


@api_bp.route('/employees', methods=['POST'])
def tambah_pegawai():
    data = _json_body()
    if _missing_required(data):
        return error_response(REQUIRED_MESSAGE, 400)

    try:
        new_id = create_pegawai(data)
    except PegawaiError as e:
        return error_response(str(e), 400)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Database Error: %s", e)
        return error_response(str(e), 400)
    return jsonify({'id': new_id}), 201


@api_bp.route('/employees/<int:id>', methods=['PUT'])
def edit_pegawai(id):
    data = _json_body()
    if _missing_required(data):
        return error_response(REQUIRED_MESSAGE, 400)

    try:
        update_pegawai(id, data)
    except NotFoundError:
        return error_response('Pegawai tidak ditemukan', 404)
    except PegawaiError as e:
        return error_response(str(e), 400)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Database Error: %s", e)
        return error_response(str(e), 400)
    return jsonify({'success': True})


@api_bp.route('/employees/<int:id>', methods=['DELETE'])
def hapus_pegawai(id):
    delete_pegawai(id)
    return jsonify({'success': True})


@api_bp.route('/stats', methods=['GET'])
def statistik():
    return jsonify({
        'unitStats': aggregate_by_unit(),
        'rankStats': aggregate_by_rank(),
        'total': count_pegawai(),
    })


@api_bp.route('/units', methods=['GET'])
def daftar_unit():
    return jsonify(unit_options())


@api_bp.route('/status-options', methods=['GET'])
def daftar_status():
    return jsonify(STATUS_OPTIONS)


# --- Rute Dokumen ---
@api_bp.route('/upload', methods=['POST'])
def upload_dokumen():
    try:
        file = _uploaded_file()
        filename = simpan_upload(
            file,
            current_app.config['UPLOAD_FOLDER'],
            current_app.config['UPLOAD_MAX_BYTES'],
            field_name=current_app.config['UPLOAD_FIELD'],
        )
    except UploadError as e:
        return error_response(str(e), 400)
    return jsonify({'path': f"{current_app.config['UPLOAD_URL_PREFIX']}/{filename}"})


# --- Rute Excel ---
@api_bp.route('/employees/import', methods=['POST'])
def import_excel():
    try:
        file = _uploaded_file()
    except UploadError as e:
        return error_response(str(e), 400)

    if file is None or file.filename == '':
        return error_response(NO_FILE_MESSAGE, 400)
    if not allowed_file(file.filename, {'xlsx'}):
        return error_response('Format file tidak diizinkan. Harap unggah file .xlsx.', 400)

    try:
        result = import_workbook(file)
    except PegawaiError as e:
        return error_response(str(e), 400)
    return jsonify(result)


@api_bp.route('/employees/export', methods=['GET'])
def export_excel():
    search, unit = _filters()
    output = export_workbook(list_pegawai(search=search, unit=unit))
    filename = f"pegawai_{date.today().strftime('%Y%m%d')}.xlsx"
    return send_file(output, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)
