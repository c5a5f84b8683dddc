from __future__ import annotations

import logging

from flask import Flask, abort, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.uploads import save_photo
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..container import Container
from .model import UserFilters
from .service import parse_filters

LOGGER = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    users = container.user_service
    lookups = container.lookups

    def _form_options() -> dict:
        return {
            "roles": lookups.roles.options(),
            "branches": lookups.branches.options(),
            "programs": lookups.programs.options(),
        }

    @app.route("/users", endpoint="users_index")
    def users_index():
        try:
            filters = parse_filters(request.args)
        except ValidationError as e:
            flash(str(e), "danger")
            filters = UserFilters()

        page = users.list_page(filters, request.args.get("page", 1, type=int))
        return render_template("users/index.html", users=page, request=request, **_form_options())

    @app.route("/users/search", endpoint="users_search")
    def users_search():
        try:
            filters = parse_filters(request.args)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify(users.quick_search(filters))

    @app.route("/users/create", methods=["GET", "POST"], endpoint="users_create")
    def users_create():
        if request.method == "POST":
            try:
                user_id = users.create_user(
                    request.form.to_dict(),
                    branches=request.form.getlist("branches"),
                )
                flash("User was created successfully!", "success")
                return redirect(url_for("users_show", user_id=user_id))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                LOGGER.exception("Creating user failed")
                flash("System error while creating the user", "danger")

        return render_template("users/create.html", form=request.form, request=request, **_form_options())

    @app.route("/users/<int:user_id>", methods=["GET"], endpoint="users_show")
    def users_show(user_id: int):
        try:
            view = users.profile_view(user_id, tab=request.args.get("tab"))
        except NotFoundError:
            abort(404)

        return render_template(
            "users/update.html",
            view=view,
            user=view.user,
            permissions=app.config.get("PERMISSIONS", {}),
            request=request,
            **_form_options(),
            **view.extras,
        )

    @app.route("/users/<int:user_id>", methods=["POST"], endpoint="users_update")
    def users_update(user_id: int):
        data = request.form.to_dict()
        try:
            upload = request.files.get("profile_picture")
            if upload and upload.filename:
                data["profile_picture"] = save_photo(upload, app.config["PHOTO_DIR"])

            users.update_user(
                user_id,
                data,
                branches=request.form.getlist("branches"),
                programs=request.form.getlist("programs"),
                family_members=request.form.get("family_members"),
            )
            flash("User was updated successfully!", "success")
        except NotFoundError:
            abort(404)
        except ConflictError as e:
            flash(str(e), "warning")
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Updating user %s failed", user_id)
            flash("Error during updating user. Please try again later.", "danger")

        return redirect(url_for("users_show", user_id=user_id, tab=request.form.get("tab") or None))

    @app.route("/users/<int:user_id>/subjects", methods=["POST"], endpoint="users_subjects")
    def users_subjects(user_id: int):
        try:
            users.sync_subjects(user_id, request.form.getlist("subjects"))
            flash("Subjects were updated successfully!", "success")
        except NotFoundError:
            abort(404)
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Updating subjects of user %s failed", user_id)
            flash("System error while updating subjects", "danger")

        return redirect(url_for("users_show", user_id=user_id, tab="subjects"))

    @app.route(
        "/users/<int:user_id>/family/<int:member_id>/remove",
        methods=["POST"],
        endpoint="users_remove_member",
    )
    def users_remove_member(user_id: int, member_id: int):
        try:
            users.remove_family_member(user_id, member_id)
        except NotFoundError:
            abort(404)

        flash("Family member was removed successfully!", "success")
        return redirect(url_for("users_show", user_id=user_id, tab="family"))

    @app.route("/users/<int:user_id>/delete", methods=["POST"], endpoint="users_delete")
    def users_delete(user_id: int):
        try:
            users.delete_user(user_id)
            flash("User was deleted successfully!", "success")
        except NotFoundError as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Deleting user %s failed", user_id)
            flash("System error while deleting the user", "danger")

        return redirect(url_for("users_index"))

    @app.route("/profile", endpoint="profile")
    def profile():
        user_id = session.get("user_id")
        if not user_id:
            flash("Please sign in to see your profile", "warning")
            return redirect(url_for("users_index"))
        return users_show(int(user_id))
