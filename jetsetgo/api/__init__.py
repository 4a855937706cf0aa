# Routes package


def register_blueprints(app):
    from jetsetgo.api.main import main_bp
    from jetsetgo.api.flights import flights_bp
    from jetsetgo.api.auth import auth_bp
    from jetsetgo.api.bookings import bookings_bp
    from jetsetgo.api.cms import cms_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(flights_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(cms_bp)
