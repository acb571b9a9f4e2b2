import logging
import os
import sys

import click
from flask import Flask, jsonify, request, send_from_directory
from flask_migrate import Migrate

# Impor Konfigurasi dan Model
from config import Config
from models import db
from api import api_bp, error_response
from services.errors import PegawaiError
from services.excel import import_workbook
from services.schema import ensure_schema, seed_if_empty

logger = logging.getLogger(__name__)

migrate = Migrate()

# Ruang untuk header multipart di luar isi file
MULTIPART_OVERHEAD = 1024 * 1024


def setup_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def create_app(test_config=None):
    # --- Inisialisasi Aplikasi ---
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    if app.config.get('MAX_CONTENT_LENGTH') is None:
        app.config['MAX_CONTENT_LENGTH'] = app.config['UPLOAD_MAX_BYTES'] + MULTIPART_OVERHEAD
    app.json.ensure_ascii = False

    setup_logging(app.config['LOG_LEVEL'])

    # --- Inisialisasi Ekstensi ---
    db.init_app(app)
    migrate.init_app(app, db)

    # Membuat folder upload jika belum ada
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    app.register_blueprint(api_bp)
    register_error_handlers(app)
    register_commands(app)

    @app.route(f"{app.config['UPLOAD_URL_PREFIX']}/<path:filename>")
    def unduh_dokumen(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    with app.app_context():
        ensure_schema()
        if app.config['SEED_ON_EMPTY']:
            seed_if_empty()

    logger.info("Aplikasi siap, folder upload %s", app.config['UPLOAD_FOLDER'])
    return app


def register_error_handlers(app):
    def not_found(e):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Not found'}), 404
        return e

    def too_large(e):
        return error_response('File terlalu besar.', 400)

    app.register_error_handler(404, not_found)
    app.register_error_handler(413, too_large)


# --- Perintah CLI ---
def register_commands(app):
    @app.cli.command("seed")
    def seed():
        """Mengisi data contoh jika tabel pegawai masih kosong."""
        added = seed_if_empty()
        if added:
            click.echo(f"{added} data contoh pegawai berhasil ditambahkan.")
        else:
            click.echo("Tabel pegawai sudah berisi data, seed dilewati.")

    @app.cli.command("import-excel")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def import_excel(path):
        """Mengimpor data pegawai dari file .xlsx."""
        try:
            with open(path, 'rb') as f:
                result = import_workbook(f)
        except PegawaiError as e:
            raise click.ClickException(str(e))

        click.echo(
            f"Proses impor selesai. {result['created']} pegawai berhasil ditambahkan. "
            f"{result['skippedDuplicate']} data duplikat dilewati. "
            f"{result['skippedInvalid']} data tidak lengkap dilewati.")
        for message in result['errors']:
            click.echo(f"  {message}")


# --- Main execution ---
if __name__ == '__main__':
    # Gunakan host='0.0.0.0' agar bisa diakses dari jaringan lokal
    create_app().run(debug=True, host='0.0.0.0', port=3000)
