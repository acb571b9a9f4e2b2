from . import db

# Daftar status kepegawaian yang dikenal (urutan tampilan di form)
STATUS_OPTIONS = [
    'ASN',
    'Calon PNS',
    'P3K Penuh Waktu',
    'P3K Paruh Waktu',
    'Aktif',
]
DEFAULT_STATUS = 'ASN'

# Kolom teks opsional, default string kosong
TEXT_FIELDS = ['position', 'rank', 'unit', 'phone', 'email', 'address']

# Kolom path dokumen, default NULL
DOKUMEN_FIELDS = ['ktp_path', 'sk_pangkat_path', 'sk_berkala_path', 'sk_jabatan_path']


class Pegawai(db.Model):
    __tablename__ = 'employees'
    # AUTOINCREMENT supaya id tidak dipakai ulang setelah dihapus
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    nip = db.Column(db.Text, unique=True, nullable=False)
    name = db.Column(db.Text, nullable=False)
    position = db.Column(db.Text, nullable=False, default='')
    rank = db.Column(db.Text, nullable=False, default='')
    unit = db.Column(db.Text, nullable=False, default='')
    phone = db.Column(db.Text)
    email = db.Column(db.Text)
    address = db.Column(db.Text)
    status = db.Column(db.Text, default=DEFAULT_STATUS, server_default=DEFAULT_STATUS)

    # Referensi ke file yang sudah diunggah lewat /api/upload
    ktp_path = db.Column(db.Text, nullable=True)
    sk_pangkat_path = db.Column(db.Text, nullable=True)
    sk_berkala_path = db.Column(db.Text, nullable=True)
    sk_jabatan_path = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    def __repr__(self):
        return f'<Pegawai {self.nip} - {self.name}>'

    def to_dict(self):
        data = {
            'id': self.id,
            'nip': self.nip,
            'name': self.name,
            'status': self.status,
        }
        for field in TEXT_FIELDS + DOKUMEN_FIELDS:
            data[field] = getattr(self, field)
        data['created_at'] = self.created_at.strftime('%Y-%m-%d %H:%M:%S') if self.created_at else None
        return data
