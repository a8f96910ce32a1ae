# blog_api/routes/user.py

"""
User Routes.

Account endpoints: registration, session handling, profile and password reset.

Summary
-------
Endpoints include:
  - Register
  - Login / Logout
  - Current user and session token
  - Update profile
  - Delete account
  - Initiate / complete password reset

Session tokens are returned in the login body and in the httpOnly ``token``
cookie; protected endpoints accept either the cookie or a bearer header.
"""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from blog_api.configs import TOKEN_COOKIE_NAME, settings
from blog_api.dependencies import AuthServiceDep, CurrentTokenDep, IdentityDep
from blog_api.managers import limiter
from blog_api.schemas.auth import (
    DeleteAccountRequest,
    LoginRequest,
    PasswordResetRequest,
    ResetPasswordRequest,
)
from blog_api.schemas.user import UserCreate, UserResponse, UserUpdate
from blog_api.utils import success_response

router = APIRouter(prefix="/user", tags=["👤 User"])

USER_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "username": "johndoe",
    "email": "johndoe@gmail.com",
    "profilePic": None,
    "createdAt": "2025-01-01T00:00:00",
    "updatedAt": "2025-01-01T00:00:00",
}

UNAUTHORIZED_RESPONSE = {
    "description": "Unauthorized",
    "content": {
        "application/json": {
            "example": {"status": "fail", "message": "Access denied. No token provided."},
        },
    },
}

RATE_LIMIT_RESPONSE = {
    "description": "Rate limit exceeded",
    "content": {
        "application/json": {
            "example": {"status": "fail", "message": "Too many requests"},
        },
    },
}


def set_token_cookie(response: ORJSONResponse, token: str) -> None:
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        max_age=settings.COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def clear_token_cookie(response: ORJSONResponse) -> None:
    response.delete_cookie(
        key=TOKEN_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


@router.post(
    "/register",
    response_class=ORJSONResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account. A welcome email is sent on success.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {"message": "User registered successfully!", "user": USER_EXAMPLE},
                },
            },
        },
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {
                        "status": "fail",
                        "message": "Username must be at least 3 characters long",
                    },
                },
            },
        },
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Username already exists"},
                },
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="user_register",
)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def register_user(
    request: Request,
    user_create: UserCreate,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Register a new user.

    Parameters
    ----------
    request : Request
        Current request context.
    user_create : UserCreate
        Username, email and password.
    auth_service : AuthService
        Account service dependency.

    Returns
    -------
    ORJSONResponse
        201 with the created user, never including password fields.

    Raises
    ------
    ConflictError
        If the username or email is taken.
    """
    user = await auth_service.register(user_create)
    return success_response(
        "User registered successfully!",
        HTTP_201_CREATED,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_class=ORJSONResponse,
    summary="Login",
    description="Check credentials, return a session token and set it as an httpOnly cookie.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "Login successful",
                        "user": USER_EXAMPLE,
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                    },
                },
            },
        },
        401: {
            "description": "Unauthorized",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Invalid credentials"},
                },
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="user_login",
)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def login(
    request: Request,
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Login with username and password.

    Parameters
    ----------
    request : Request
        Current request context.
    credentials : LoginRequest
        Username and password.
    auth_service : AuthService
        Account service dependency.

    Returns
    -------
    ORJSONResponse
        The user and token; the token is also set as the ``token`` cookie.

    Raises
    ------
    InvalidCredentialsError
        If the username is unknown or the password is wrong.
    """
    user, token = await auth_service.login(
        credentials.username,
        credentials.password.get_secret_value(),
    )
    response = success_response(
        "Login successful",
        user=UserResponse.model_validate(user),
        token=token,
    )
    set_token_cookie(response, token)
    return response


@router.post(
    "/logout",
    response_class=ORJSONResponse,
    summary="Logout",
    description="Revoke the presented token and clear the session cookie.",
    responses={
        200: {"content": {"application/json": {"example": {"message": "Logout successful"}}}},
        401: UNAUTHORIZED_RESPONSE,
    },
    operation_id="user_logout",
)
async def logout(
    request: Request,
    token: CurrentTokenDep,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Logout the current session.

    Parameters
    ----------
    request : Request
        Current request context.
    token : str
        Token that authenticated the request.
    auth_service : AuthService
        Account service dependency.

    Returns
    -------
    ORJSONResponse
        Confirmation message with the cookie cleared.
    """
    await auth_service.logout(token)
    response = success_response("Logout successful")
    clear_token_cookie(response)
    return response


@router.get(
    "/currentUser",
    response_class=ORJSONResponse,
    summary="Get current user",
    description="Resolve the session token to its user.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "User fetched successfully", "user": USER_EXAMPLE},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
    },
    operation_id="user_current",
)
async def current_user(
    request: Request,
    identity: IdentityDep,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Get the authenticated user.

    Parameters
    ----------
    request : Request
        Current request context.
    identity : Identity
        Identity resolved by the guard.
    auth_service : AuthService
        Account service dependency.

    Returns
    -------
    ORJSONResponse
        The current user.
    """
    user = await auth_service.current_user(identity)
    return success_response("User fetched successfully", user=UserResponse.model_validate(user))


@router.get(
    "/token",
    response_class=ORJSONResponse,
    summary="Get session token",
    description="Echo the token that authenticated the request, read from the cookie or header.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "Token retrieved successfully",
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                    },
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
    },
    operation_id="user_token",
)
async def session_token(request: Request, token: CurrentTokenDep) -> ORJSONResponse:
    """
    Return the current session token.

    Browser clients cannot read the httpOnly cookie, so this hands the token
    back once the guard has accepted it.

    Parameters
    ----------
    request : Request
        Current request context.
    token : str
        Token that authenticated the request.

    Returns
    -------
    ORJSONResponse
        The token.
    """
    return success_response("Token retrieved successfully", token=token)


@router.put(
    "/updateProfile",
    response_class=ORJSONResponse,
    summary="Update profile",
    description="Change username, email and/or profile picture of the current user.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Profile updated successfully", "user": USER_EXAMPLE},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Email already exists"},
                },
            },
        },
    },
    operation_id="user_update_profile",
)
async def update_profile(
    request: Request,
    user_update: UserUpdate,
    identity: IdentityDep,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Update the current user's profile.

    Parameters
    ----------
    request : Request
        Current request context.
    user_update : UserUpdate
        Fields to change; omitted fields stay as they are.
    identity : Identity
        Identity resolved by the guard.
    auth_service : AuthService
        Account service dependency.

    Returns
    -------
    ORJSONResponse
        The updated user.
    """
    user = await auth_service.update_profile(identity, user_update)
    return success_response("Profile updated successfully", user=UserResponse.model_validate(user))


@router.delete(
    "/delete",
    response_class=ORJSONResponse,
    summary="Delete account",
    description="Delete the current user and all of their blogs. The username must be retyped.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "User and their blogs deleted successfully"},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {
                        "status": "fail",
                        "message": "You are not authorized to delete this user",
                    },
                },
            },
        },
    },
    operation_id="user_delete",
)
async def delete_user(
    request: Request,
    confirmation: DeleteAccountRequest,
    identity: IdentityDep,
    token: CurrentTokenDep,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Delete the current account.

    Parameters
    ----------
    request : Request
        Current request context.
    confirmation : DeleteAccountRequest
        Retyped username.
    identity : Identity
        Identity resolved by the guard.
    token : str
        Token that authenticated the request; revoked on success.
    auth_service : AuthService
        Account service dependency.

    Returns
    -------
    ORJSONResponse
        Confirmation message with the cookie cleared.
    """
    await auth_service.delete_account(identity, confirmation.username, token)
    response = success_response("User and their blogs deleted successfully")
    clear_token_cookie(response)
    return response


@router.post(
    "/initiatePasswordReset",
    response_class=ORJSONResponse,
    summary="Initiate password reset",
    description="Email a short-lived reset token to the account's address.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Password reset token sent to email"},
                },
            },
        },
        404: {
            "description": "Not Found",
            "content": {
                "application/json": {"example": {"status": "fail", "message": "User not found"}},
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="user_initiate_password_reset",
)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def initiate_password_reset(
    request: Request,
    reset_request: PasswordResetRequest,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Start the password reset flow.

    Parameters
    ----------
    request : Request
        Current request context.
    reset_request : PasswordResetRequest
        Account email.
    auth_service : AuthService
        Account service dependency.

    Returns
    -------
    ORJSONResponse
        Confirmation message.
    """
    await auth_service.initiate_password_reset(str(reset_request.email))
    return success_response("Password reset token sent to email")


@router.post(
    "/resetPassword",
    response_class=ORJSONResponse,
    summary="Reset password",
    description="Consume an emailed reset token and set a new password.",
    responses={
        200: {"content": {"application/json": {"example": {"message": "Password reset successful"}}}},
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Token is invalid or has expired"},
                },
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="user_reset_password",
)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def reset_password(
    request: Request,
    reset: ResetPasswordRequest,
    auth_service: AuthServiceDep,
) -> ORJSONResponse:
    """
    Complete the password reset flow.

    Parameters
    ----------
    request : Request
        Current request context.
    reset : ResetPasswordRequest
        Reset token and new password.
    auth_service : AuthService
        Account service dependency.

    Returns
    -------
    ORJSONResponse
        Confirmation message.

    Raises
    ------
    PasswordResetError
        If the token does not match or has expired.
    """
    await auth_service.reset_password(reset.token, reset.new_password.get_secret_value())
    return success_response("Password reset successful")
