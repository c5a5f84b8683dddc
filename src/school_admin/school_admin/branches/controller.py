from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container

LOGGER = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    branches = container.branch_service

    @app.route("/branches", methods=["GET", "POST"], endpoint="branches_index")
    def branches_index():
        if request.method == "POST":
            try:
                branches.create(name=request.form.get("name", ""))
                flash("Branch was created successfully!", "success")
                return redirect(url_for("branches_index"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                LOGGER.exception("Creating branch failed")
                flash("System error while creating the branch", "danger")

        return render_template("branches/index.html", branches=branches.list_all(), form=request.form)

    @app.route("/branches/<int:branch_id>", methods=["POST"], endpoint="branches_update")
    def branches_update(branch_id: int):
        try:
            branches.rename(branch_id, name=request.form.get("name", ""))
            flash("Branch was updated successfully!", "success")
        except (ValidationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Updating branch %s failed", branch_id)
            flash("System error while updating the branch", "danger")

        return redirect(url_for("branches_index"))

    @app.route("/branches/<int:branch_id>/delete", methods=["POST"], endpoint="branches_delete")
    def branches_delete(branch_id: int):
        try:
            branches.delete(branch_id)
            flash("Branch was deleted successfully!", "success")
        except NotFoundError as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Deleting branch %s failed", branch_id)
            flash("System error while deleting the branch", "danger")

        return redirect(url_for("branches_index"))
