from drf_spectacular.extensions import OpenApiAuthenticationExtension


class ClaimsJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "hc_core.iam.auth.ClaimsJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        # Documented as Bearer; Swagger "Authorize" does not do cookies.
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Send the identity provider's access token via "
                "`Authorization: Bearer <token>` or the HttpOnly cookie (hc_access)."
            ),
        }
