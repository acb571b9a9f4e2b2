import os
from dotenv import load_dotenv

# Menentukan direktori dasar proyek
basedir = os.path.abspath(os.path.dirname(__file__))
# Memuat environment variables dari file .env
load_dotenv(os.path.join(basedir, '.env'))


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {'1', 'true', 'yes', 'on'}


class Config:
    # Mengambil URL database dari environment variable
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
                              'sqlite:///' + os.path.join(basedir, 'kesbangpol.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Folder upload dokumen pegawai (KTP, SK Pangkat, SK Berkala, SK Jabatan)
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'uploads')
    UPLOAD_URL_PREFIX = '/uploads'
    UPLOAD_FIELD = 'file'

    # Batas ukuran file upload: 10MB
    UPLOAD_MAX_BYTES = int(os.environ.get('UPLOAD_MAX_BYTES', 10 * 1024 * 1024))

    # Isi data contoh jika tabel pegawai masih kosong
    SEED_ON_EMPTY = _env_flag('SEED_ON_EMPTY', True)

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
