"""Penyimpanan data pegawai (tabel ``employees``).

Setiap fungsi di sini menjalankan satu statement SQL lewat Flask-SQLAlchemy dan
harus dipanggil di dalam app context. Update bersifat menimpa penuh: field yang
tidak dikirim akan dikosongkan, bukan dipertahankan.
"""
import logging

from sqlalchemy import distinct, func, or_
from sqlalchemy.exc import IntegrityError

from models import db
from models.pegawai import (DEFAULT_STATUS, DOKUMEN_FIELDS, STATUS_OPTIONS,
                            TEXT_FIELDS, Pegawai)
from services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = 'NIP dan Nama wajib diisi'


def _teks(value):
    if value is None or value == '':
        return ''
    return str(value)


def _path(value):
    return str(value) if value else None


def validate_required(fields):
    nip = fields.get('nip')
    name = fields.get('name')
    if nip is None or not str(nip).strip() or name is None or not str(name).strip():
        raise ValidationError(REQUIRED_MESSAGE)


def _normalize(fields):
    """Bentuk nilai kolom lengkap dari input, default untuk field yang kosong."""
    validate_required(fields)

    status = fields.get('status') or DEFAULT_STATUS
    if status not in STATUS_OPTIONS:
        logger.warning("Status pegawai tidak dikenal: %r (NIP %s)", status, fields.get('nip'))

    values = {
        'nip': str(fields['nip']),
        'name': str(fields['name']),
        'status': str(status),
    }
    for field in TEXT_FIELDS:
        values[field] = _teks(fields.get(field))
    for field in DOKUMEN_FIELDS:
        values[field] = _path(fields.get(field))
    return values


def list_pegawai(search=None, unit=None):
    query = Pegawai.query

    # Filter pencarian teks: nama, NIP, jabatan
    if search:
        query = query.filter(
            or_(
                Pegawai.name.icontains(search, autoescape=True),
                Pegawai.nip.contains(search, autoescape=True),
                Pegawai.position.icontains(search, autoescape=True)
            )
        )

    if unit:
        query = query.filter(Pegawai.unit == unit)

    return query.order_by(Pegawai.name.asc()).all()


def _id_in_range(pegawai_id):
    # Batas INTEGER 64-bit SQLite
    return -(2 ** 63) <= pegawai_id < 2 ** 63


def get_pegawai(pegawai_id):
    pegawai = db.session.get(Pegawai, pegawai_id) if _id_in_range(pegawai_id) else None
    if pegawai is None:
        raise NotFoundError('Pegawai tidak ditemukan')
    return pegawai


def create_pegawai(fields):
    values = _normalize(fields)
    pegawai = Pegawai(**values)
    try:
        db.session.add(pegawai)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.error("Gagal menambahkan pegawai NIP %s: %s", values['nip'], e.orig)
        raise ConflictError(f"NIP {values['nip']} sudah digunakan.") from e
    logger.info("Pegawai baru id=%s NIP %s ditambahkan", pegawai.id, pegawai.nip)
    return pegawai.id


def update_pegawai(pegawai_id, fields):
    values = _normalize(fields)
    pegawai = get_pegawai(pegawai_id)

    # Timpa semua kolom, tidak ada partial update
    for column, value in values.items():
        setattr(pegawai, column, value)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.error("Gagal memperbarui pegawai id=%s: %s", pegawai_id, e.orig)
        raise ConflictError(f"NIP {values['nip']} sudah digunakan oleh pegawai lain.") from e
    logger.info("Pegawai id=%s diperbarui", pegawai_id)


def delete_pegawai(pegawai_id):
    if not _id_in_range(pegawai_id):
        return
    deleted = Pegawai.query.filter_by(id=pegawai_id).delete()
    db.session.commit()
    if deleted:
        logger.info("Pegawai id=%s dihapus", pegawai_id)


def _aggregate(column):
    label = func.coalesce(column, '')
    rows = db.session.query(label, func.count(Pegawai.id)).group_by(label).all()
    return [{'name': name, 'value': value} for name, value in rows]


def aggregate_by_unit():
    return _aggregate(Pegawai.unit)


def aggregate_by_rank():
    return _aggregate(Pegawai.rank)


def count_pegawai():
    return Pegawai.query.count()


def unit_options():
    # Daftar unik unit kerja untuk dropdown
    return [u[0] for u in db.session.query(distinct(Pegawai.unit)).filter(
        Pegawai.unit.isnot(None), Pegawai.unit != '').order_by(Pegawai.unit).all()]
