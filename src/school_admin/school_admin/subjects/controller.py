from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container

LOGGER = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    subjects = container.subject_service

    @app.route("/subjects", methods=["GET", "POST"], endpoint="subjects_index")
    def subjects_index():
        if request.method == "POST":
            try:
                subjects.create(
                    name=request.form.get("name", ""),
                    description=request.form.get("description", ""),
                )
                flash("Subject was created successfully!", "success")
                return redirect(url_for("subjects_index"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                LOGGER.exception("Creating subject failed")
                flash("System error while creating the subject", "danger")

        return render_template("subjects/index.html", subjects=subjects.list_all(), form=request.form)

    @app.route("/subjects/<int:subject_id>", methods=["POST"], endpoint="subjects_update")
    def subjects_update(subject_id: int):
        try:
            subjects.update(
                subject_id,
                name=request.form.get("name", ""),
                description=request.form.get("description", ""),
            )
            flash("Subject was updated successfully!", "success")
        except (ValidationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Updating subject %s failed", subject_id)
            flash("System error while updating the subject", "danger")

        return redirect(url_for("subjects_index"))

    @app.route("/subjects/<int:subject_id>/delete", methods=["POST"], endpoint="subjects_delete")
    def subjects_delete(subject_id: int):
        try:
            subjects.delete(subject_id)
            flash("Subject was deleted successfully!", "success")
        except NotFoundError as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Deleting subject %s failed", subject_id)
            flash("System error while deleting the subject", "danger")

        return redirect(url_for("subjects_index"))
