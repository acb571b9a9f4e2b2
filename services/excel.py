import io
import logging
import zipfile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from services.errors import ConflictError, ValidationError
from services.pegawai_store import create_pegawai

logger = logging.getLogger(__name__)

EXCEL_HEADER = ['nip', 'name', 'position', 'rank', 'unit', 'phone', 'email', 'address', 'status']

# Angka di atas 2**53 tidak lagi presisi sebagai float
MAX_EXACT_NUMBER = 2 ** 53


def allowed_file(filename, extensions):
    return '.' in filename and \
        filename.rsplit('.', 1)[1].lower() in extensions


def _cell_text(value):
    # Excel menyimpan NIP/no HP sebagai angka jika sel tidak bertipe teks
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if value is None:
        return None
    return str(value).strip()


def import_workbook(file):
    """Tambah pegawai dari file .xlsx, satu baris satu pegawai.

    Baris kosong dilewati. Baris tanpa NIP/Nama atau dengan NIP yang sudah ada
    tidak menghentikan proses, hanya dihitung dan dicatat di ``errors``.
    """
    try:
        workbook = openpyxl.load_workbook(file, data_only=True)  # baca nilai, bukan formula
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ValidationError(f'File Excel tidak dapat dibaca: {e}') from e

    sheet = workbook.active

    # Validasi header
    header = [_cell_text(cell.value) for cell in sheet[1]]
    header = [h.lower() if h else h for h in header[:len(EXCEL_HEADER)]]
    if header != EXCEL_HEADER:
        raise ValidationError(
            f"Header file Excel tidak sesuai. Header yang diharapkan: {', '.join(EXCEL_HEADER)}")

    result = {'created': 0, 'skippedDuplicate': 0, 'skippedInvalid': 0, 'errors': []}

    for index, row in enumerate(sheet.iter_rows(min_row=2, values_only=True), start=2):
        row = list(row[:len(EXCEL_HEADER)]) + [None] * (len(EXCEL_HEADER) - len(row))
        if all(cell is None or cell == '' for cell in row):
            continue

        nip_cell = row[0]
        if isinstance(nip_cell, (int, float)) and not isinstance(nip_cell, bool) \
                and abs(nip_cell) >= MAX_EXACT_NUMBER:
            result['skippedInvalid'] += 1
            result['errors'].append(
                f'Baris {index}: NIP tersimpan sebagai angka dan tidak presisi. '
                f'Ubah sel NIP menjadi teks.')
            continue

        fields = {column: _cell_text(value) for column, value in zip(EXCEL_HEADER, row)}
        try:
            create_pegawai(fields)
        except ValidationError as e:
            result['skippedInvalid'] += 1
            result['errors'].append(f'Baris {index}: {e}')
            continue
        except ConflictError as e:
            result['skippedDuplicate'] += 1
            result['errors'].append(f'Baris {index}: {e}')
            continue
        result['created'] += 1

    logger.info("Import Excel selesai: %d ditambahkan, %d duplikat, %d tidak valid",
                result['created'], result['skippedDuplicate'], result['skippedInvalid'])
    return result


def export_workbook(semua_pegawai):
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = 'Pegawai'
    sheet.append(EXCEL_HEADER)
    for pegawai in semua_pegawai:
        sheet.append([getattr(pegawai, column) for column in EXCEL_HEADER])

    output = io.BytesIO()
    workbook.save(output)
    output.seek(0)
    return output
