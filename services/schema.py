import logging

from sqlalchemy import inspect, text

from models import db
from models.pegawai import DOKUMEN_FIELDS, Pegawai
from services.pegawai_store import count_pegawai

logger = logging.getLogger(__name__)

SEED_DATA = [
    ('198501012010011001', 'Budi Santoso, S.Sos', 'Kepala Badan', 'Pembina Utama Muda (IV/c)', 'Pimpinan',
     '08123456789', 'budi@example.com', 'Aktif'),
    ('198705122012012003', 'Siti Aminah, M.Si', 'Sekretaris', 'Pembina (IV/a)', 'Sekretariat',
     '08123456780', 'siti@example.com', 'Aktif'),
    ('199003152015031002', 'Agus Setiawan, S.T', 'Kabid Ideologi', 'Penata Tk. I (III/d)', 'Bidang Ideologi',
     '08123456781', 'agus@example.com', 'Aktif'),
    ('199208202018012005', 'Dewi Lestari, S.H', 'Analis Politik', 'Penata (III/c)', 'Bidang Politik',
     '08123456782', 'dewi@example.com', 'Aktif'),
    ('199511302020011004', 'Rizky Pratama, S.Kom', 'Pranata Komputer', 'Penata Muda (III/a)', 'Sekretariat',
     '08123456783', 'rizky@example.com', 'Aktif'),
]


def ensure_schema():
    """Buat tabel jika belum ada, lalu tambahkan kolom dokumen yang belum ada.

    Migrasi ini hanya menambah kolom dan tidak mencatat versi.
    """
    db.create_all()

    columns = {c['name'] for c in inspect(db.engine).get_columns(Pegawai.__tablename__)}
    missing = [field for field in DOKUMEN_FIELDS if field not in columns]
    for field in missing:
        db.session.execute(text(f'ALTER TABLE {Pegawai.__tablename__} ADD COLUMN {field} TEXT'))
        logger.info("Kolom %s ditambahkan ke tabel %s", field, Pegawai.__tablename__)
    if missing:
        db.session.commit()
    return missing


def seed_if_empty():
    if count_pegawai() > 0:
        return 0

    for nip, name, position, rank, unit, phone, email, status in SEED_DATA:
        db.session.add(Pegawai(nip=nip, name=name, position=position, rank=rank, unit=unit,
                               phone=phone, email=email, status=status))
    db.session.commit()
    logger.info("%d data contoh pegawai ditambahkan", len(SEED_DATA))
    return len(SEED_DATA)
