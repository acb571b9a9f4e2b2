import logging
import os
import random
import time

from werkzeug.utils import secure_filename

from services.errors import UploadError

logger = logging.getLogger(__name__)

NO_FILE_MESSAGE = 'No file uploaded'


def file_size(file):
    stream = file.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _format_size(num_bytes):
    if num_bytes >= 1024 * 1024:
        return f"{num_bytes // (1024 * 1024)} MB"
    return f"{num_bytes} byte"


def generate_filename(field_name, original_filename):
    """Nama file unik: <field>-<epoch ms>-<acak><ekstensi>."""
    _, ext = os.path.splitext(original_filename or '')
    ext = secure_filename(ext.lstrip('.'))
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}"
    return f"{field_name}-{unique_suffix}" + (f".{ext}" if ext else '')


def simpan_upload(file, upload_folder, max_bytes, field_name='file'):
    """Simpan file ke folder upload dan kembalikan nama file yang dipakai."""
    if file is None or file.filename == '':
        raise UploadError(NO_FILE_MESSAGE)

    size = file_size(file)
    if size > max_bytes:
        logger.warning("Upload %r ditolak: %d byte melebihi batas %d byte", file.filename, size, max_bytes)
        raise UploadError(f"File terlalu besar. Maksimal {_format_size(max_bytes)}.")

    os.makedirs(upload_folder, exist_ok=True)
    filename = generate_filename(field_name, file.filename)
    file_path = os.path.join(upload_folder, filename)
    while os.path.exists(file_path):
        filename = generate_filename(field_name, file.filename)
        file_path = os.path.join(upload_folder, filename)

    try:
        file.save(file_path)
    except OSError:
        # Hapus file yang mungkin sudah tersimpan sebagian
        if os.path.exists(file_path):
            os.remove(file_path)
        raise

    logger.info("File %r disimpan sebagai %s (%d byte)", file.filename, filename, size)
    return filename
