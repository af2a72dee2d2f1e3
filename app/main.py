from dotenv import load_dotenv

from server import server

load_dotenv()

# Served with: uvicorn main:server_app
server_app = server.handler
