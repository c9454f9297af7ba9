from mangum import Mangum

from api.app import create_app

app = create_app(root_path="/api")

handler = Mangum(app)
