from backend.server import run

run()
