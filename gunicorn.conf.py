import os
import sys

# Add src directory to Python path so 'fr_law' package can be found
sys.path.append(os.path.join(os.getcwd(), 'src'))

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# The SQLite connection is read-only and shared by threads within a worker.
workers = int(os.environ.get('GUNICORN_WORKERS', '2'))
threads = int(os.environ.get('GUNICORN_THREADS', '4'))
worker_class = "gthread"
worker_tmp_dir = "/dev/shm"

# Each worker opens its own connection after fork.
preload_app = False
accesslog = "-"
errorlog = "-"
loglevel = "info"
timeout = 30
