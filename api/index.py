from mangum import Mangum

from collectible.api import app

handler = Mangum(app)
