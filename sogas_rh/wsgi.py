from sogas_rh import create_app

app = create_app()
