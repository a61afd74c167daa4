from api_shopify.api.app import app_factory, run

if __name__ == "__main__":
    run()
