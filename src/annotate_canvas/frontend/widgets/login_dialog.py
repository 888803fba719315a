from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from annotate_canvas.controllers.auth_controller import AuthController
from annotate_canvas.services.exceptions import DomainException


class LoginDialog(QDialog):
    """Modal login / registration form. Accepted once a session exists."""

    def __init__(self, auth_controller: AuthController, parent=None):
        super().__init__(parent)
        self.auth_controller = auth_controller
        self.init_ui()

    def init_ui(self):
        self.setWindowTitle("Sign in")
        self.setMinimumWidth(320)

        layout = QVBoxLayout()

        layout.addWidget(QLabel("Username"))
        self.username_input = QLineEdit()
        self.username_input.setPlaceholderText("Enter your username")
        layout.addWidget(self.username_input)

        layout.addWidget(QLabel("Password"))
        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)
        self.password_input.returnPressed.connect(self.login)
        layout.addWidget(self.password_input)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #ef4444;")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        buttons = QHBoxLayout()
        login_button = QPushButton("Login")
        login_button.setDefault(True)
        login_button.clicked.connect(self.login)
        buttons.addWidget(login_button)

        register_button = QPushButton("Register")
        register_button.clicked.connect(self.register)
        buttons.addWidget(register_button)
        layout.addLayout(buttons)

        self.setLayout(layout)
        self.username_input.setFocus()

    def login(self):
        self._submit(self.auth_controller.login)

    def register(self):
        self._submit(self.auth_controller.register)

    def _submit(self, action):
        username = self.username_input.text()
        password = self.password_input.text()
        if not username.strip() or not password:
            self.show_error("Please enter a username and a password.")
            return
        try:
            action(username, password)
        except DomainException as e:
            self.show_error(str(e))
            return
        self.password_input.clear()
        self.error_label.hide()
        self.accept()

    def show_error(self, message: str):
        self.error_label.setText(message)
        self.error_label.show()
