from flask_jwt_extended import create_access_token, create_refresh_token


def issue_tokens(user):
    """Access + refresh token pair for a user; role rides along as a claim"""
    access_token = create_access_token(
        identity=user.id,
        additional_claims={'email': user.email, 'name': user.name, 'role': user.role.value}
    )
    refresh_token = create_refresh_token(identity=user.id)
    return {
        'accessToken': access_token,
        'refreshToken': refresh_token,
        'tokenType': 'Bearer'
    }
