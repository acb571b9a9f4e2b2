class PegawaiError(Exception):
    """Base exception untuk kesalahan pada data pegawai."""


class ValidationError(PegawaiError):
    """Field wajib (NIP/Nama) kosong atau data tidak valid."""


class ConflictError(PegawaiError):
    """NIP sudah dipakai oleh pegawai lain."""


class NotFoundError(PegawaiError):
    """Pegawai dengan id tersebut tidak ada."""


class UploadError(PegawaiError):
    """File upload tidak ada atau melebihi batas ukuran."""
