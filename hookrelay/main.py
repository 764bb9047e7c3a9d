from hookrelay.api.main import create_app

app = create_app()
